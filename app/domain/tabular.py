"""
app/domain/tabular.py

Types shared by the generic tabular validation engine.

Findings are data, never exceptions: every check produces zero or more
``RowValidationError`` values and the engine folds them into a per-row
``RowState``. Only ``error`` severity blocks a row from the accepted set.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Sequence


class Severity(str, Enum):
    """Classification of one validation finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class FindingCode:
    MISSING_COLUMN = "MISSING_COLUMN"
    REQUIRED_FIELD = "REQUIRED_FIELD"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN_COLUMN = "UNKNOWN_COLUMN"


HEADER_ROW_NUMBER = 1
FIRST_DATA_ROW_NUMBER = 2

RawRow = Mapping[str, Any]


@dataclass(frozen=True)
class RowValidationError:
    """
    One validation finding for a cell, a row, or the header.
    """

    row_number: int
    column: str
    message: str
    value: Any = None
    severity: Severity = Severity.ERROR
    code: str = FindingCode.VALIDATION_ERROR
    suggested_fix: str | None = None

    @property
    def blocks_acceptance(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row_number,
            "column": self.column,
            "message": self.message,
            "value": self.value,
            "severity": self.severity.value,
            "code": self.code,
            "suggested_fix": self.suggested_fix,
        }


PlainValidator = Callable[[Any], str | None]
ContextValidator = Callable[[Any, RawRow, int, str], RowValidationError | None]
Transformer = Callable[[Any], Any]
CrossFieldValidator = Callable[[RawRow, int], list[RowValidationError]]
BatchValidator = Callable[[Sequence[tuple[int, RawRow]]], list[RowValidationError]]


@dataclass(frozen=True)
class ColumnRule:
    """
    Declarative rule for one column.

    ``validate`` returns an error message (always ``error`` severity);
    ``validate_with_context`` sees the whole raw row and returns a fully
    classified finding. When both are set the context-aware check wins.
    ``transform`` only runs after the value has been accepted.
    """

    validate: PlainValidator | None = None
    validate_with_context: ContextValidator | None = None
    transform: Transformer | None = None
    required: bool = False

    def check(
        self,
        value: Any,
        row: RawRow,
        row_number: int,
        column: str,
    ) -> list[RowValidationError]:
        """
        Run whichever validator governs this column and return its findings.
        """

        if self.validate_with_context is not None:
            finding = self.validate_with_context(value, row, row_number, column)
            return [finding] if finding is not None else []

        if self.validate is not None:
            message = self.validate(value)
            if message:
                return [
                    RowValidationError(
                        row_number=row_number,
                        column=column,
                        message=message,
                        value=value,
                        severity=Severity.ERROR,
                        code=FindingCode.VALIDATION_ERROR,
                    )
                ]
        return []

    def apply_transform(self, value: Any) -> Any:
        if self.transform is None:
            return value
        return self.transform(value)


@dataclass(frozen=True)
class RuleSet:
    """
    Complete declarative description of one tabular file format.

    ``column_rules`` is ordered; iteration order is the processing order.
    ``header_labels`` are the descriptive template headers, while
    ``header_display_names`` are the short names used in messages.
    """

    column_rules: Mapping[str, ColumnRule]
    required_columns: tuple[str, ...] = ()
    header_display_names: Mapping[str, str] = field(default_factory=dict)
    header_labels: Mapping[str, str] = field(default_factory=dict)
    cross_field_validators: tuple[CrossFieldValidator, ...] = ()
    batch_validators: tuple[BatchValidator, ...] = ()

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.column_rules.keys())

    def display_name(self, column: str) -> str:
        return self.header_display_names.get(column, column)

    def header_label(self, column: str) -> str:
        return self.header_labels.get(column, self.display_name(column))


@dataclass(frozen=True)
class RowState:
    """
    Immutable accumulator for the findings of one row.

    The row's classification is derived from the findings it holds, so a
    row is always exactly one of ``error``, ``warning`` or ``clean``.
    """

    row_number: int
    findings: tuple[RowValidationError, ...] = ()

    def absorb(self, finding: RowValidationError) -> RowState:
        return RowState(row_number=self.row_number, findings=self.findings + (finding,))

    @property
    def has_error(self) -> bool:
        return any(finding.severity is Severity.ERROR for finding in self.findings)

    @property
    def has_warning(self) -> bool:
        return any(finding.severity is Severity.WARNING for finding in self.findings)

    @property
    def status(self) -> str:
        if self.has_error:
            return Severity.ERROR.value
        if self.has_warning:
            return Severity.WARNING.value
        return "clean"


@dataclass(frozen=True)
class ValidationSummary:
    """
    Aggregate row counts for one validation run.
    """

    total_rows: int
    valid_rows: int
    error_rows: int
    warning_rows: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "error_rows": self.error_rows,
            "warning_rows": self.warning_rows,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a whole file against a rule set.
    """

    accepted_rows: list[dict[str, Any]]
    errors: list[RowValidationError]
    summary: ValidationSummary

    @property
    def success(self) -> bool:
        return not any(error.blocks_acceptance for error in self.errors)

    def errors_by_row(self) -> dict[int, list[RowValidationError]]:
        grouped: dict[int, list[RowValidationError]] = {}
        for error in self.errors:
            grouped.setdefault(error.row_number, []).append(error)
        return grouped

    def severity_counts(self) -> dict[str, int]:
        counts = {severity.value: 0 for severity in Severity}
        for error in self.errors:
            counts[error.severity.value] += 1
        return counts

    def code_counts(self) -> dict[str, int]:
        return dict(Counter(error.code for error in self.errors))

    @classmethod
    def structural_failure(
        cls,
        errors: Sequence[RowValidationError],
        *,
        total_rows: int = 0,
    ) -> ValidationResult:
        """
        Result for a file that cannot be processed row by row at all.
        """

        return cls(
            accepted_rows=[],
            errors=list(errors),
            summary=ValidationSummary(
                total_rows=total_rows,
                valid_rows=0,
                error_rows=total_rows,
                warning_rows=0,
            ),
        )
