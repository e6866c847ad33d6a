"""
app/validators/tabular_validator.py

Domain-agnostic validation engine for parsed tabular rows.

Processing order per row is fixed: required columns, then column rules in
rule-set order, then cross-field validators in the order given. Batch
validators run once over all rows that survived row-level validation.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Any, Iterable, Sequence

from app.domain.tabular import (
    FIRST_DATA_ROW_NUMBER,
    HEADER_ROW_NUMBER,
    FindingCode,
    RawRow,
    RowState,
    RowValidationError,
    RuleSet,
    Severity,
    ValidationResult,
    ValidationSummary,
)
from app.validators.cell_validators import is_blank

logger = logging.getLogger(__name__)


def fold_findings(state: RowState, findings: Iterable[RowValidationError]) -> RowState:
    """
    Fold findings into a row state in order.
    """

    return reduce(RowState.absorb, findings, state)


class TabularValidator:
    """
    Validates raw rows against a ``RuleSet`` and collects every finding.
    """

    def validate(
        self,
        rows: Sequence[RawRow],
        rule_set: RuleSet,
        *,
        headers: Sequence[str] | None = None,
    ) -> ValidationResult:
        """
        Validate all rows and return accepted typed rows plus findings.

        When ``headers`` is omitted the first row's keys are treated as the
        header. Missing required columns short-circuit the whole run.
        """

        rows = list(rows)
        present_columns = self._present_columns(rows, headers)
        if present_columns is not None:
            missing = self.find_missing_columns(present_columns, rule_set)
            if missing:
                logger.info(
                    "Tabular validation aborted: %d required column(s) missing: %s",
                    len(missing),
                    ", ".join(error.column for error in missing),
                )
                return ValidationResult.structural_failure(missing, total_rows=len(rows))

        states: list[RowState] = []
        typed_rows: dict[int, dict[str, Any]] = {}
        for index, row in enumerate(rows):
            row_number = index + FIRST_DATA_ROW_NUMBER
            state, typed_row = self._validate_row(row, row_number, rule_set)
            states.append(state)
            if not state.has_error:
                typed_rows[row_number] = typed_row

        states = self._apply_batch_validators(rows, states, rule_set)

        accepted_rows = [
            typed_rows[state.row_number]
            for state in states
            if not state.has_error
        ]
        errors = [finding for state in states for finding in state.findings]
        summary = ValidationSummary(
            total_rows=len(rows),
            valid_rows=len(accepted_rows),
            error_rows=sum(1 for state in states if state.has_error),
            warning_rows=sum(1 for state in states if state.status == Severity.WARNING.value),
        )
        logger.debug(
            "Tabular validation finished total=%d valid=%d error_rows=%d warning_rows=%d",
            summary.total_rows,
            summary.valid_rows,
            summary.error_rows,
            summary.warning_rows,
        )
        return ValidationResult(accepted_rows=accepted_rows, errors=errors, summary=summary)

    def find_missing_columns(
        self,
        present_columns: Iterable[str],
        rule_set: RuleSet,
    ) -> list[RowValidationError]:
        """
        Return one ``MISSING_COLUMN`` error per required column not present.
        """

        present = set(present_columns)
        errors: list[RowValidationError] = []
        for column in rule_set.required_columns:
            if column in present:
                continue
            display_name = rule_set.display_name(column)
            errors.append(
                RowValidationError(
                    row_number=HEADER_ROW_NUMBER,
                    column=column,
                    message=f"Required column '{display_name}' is missing from the CSV file",
                    severity=Severity.ERROR,
                    code=FindingCode.MISSING_COLUMN,
                    suggested_fix=(
                        f"Add a column named '{rule_set.header_label(column)}' to your CSV file"
                    ),
                )
            )
        return errors

    # ------------------------------------------------------------------
    # Row processing
    # ------------------------------------------------------------------

    def _validate_row(
        self,
        row: RawRow,
        row_number: int,
        rule_set: RuleSet,
    ) -> tuple[RowState, dict[str, Any]]:
        state = RowState(row_number=row_number)
        typed_row: dict[str, Any] = {}

        reported_required: set[str] = set()
        for column in rule_set.required_columns:
            if is_blank(row.get(column)):
                state = state.absorb(self._required_error(row, row_number, column, rule_set))
                reported_required.add(column)

        for column, rule in rule_set.column_rules.items():
            if column not in row and not rule.required:
                continue

            value = row.get(column)
            if is_blank(value):
                if rule.required:
                    if column not in reported_required:
                        state = state.absorb(
                            self._required_error(row, row_number, column, rule_set)
                        )
                    continue
                typed_row[column] = None
                continue

            findings = rule.check(value, row, row_number, column)
            state = fold_findings(state, findings)
            if any(finding.blocks_acceptance for finding in findings):
                continue
            typed_row[column] = rule.apply_transform(value)

        if not state.has_error:
            for validator in rule_set.cross_field_validators:
                state = fold_findings(state, validator(row, row_number))

        return state, typed_row

    def _apply_batch_validators(
        self,
        rows: Sequence[RawRow],
        states: list[RowState],
        rule_set: RuleSet,
    ) -> list[RowState]:
        if not rule_set.batch_validators:
            return states

        candidates = [
            (state.row_number, row)
            for state, row in zip(states, rows)
            if not state.has_error
        ]
        if not candidates:
            return states

        by_row: dict[int, list[RowValidationError]] = {}
        for validator in rule_set.batch_validators:
            for finding in validator(candidates):
                by_row.setdefault(finding.row_number, []).append(finding)

        return [fold_findings(state, by_row.get(state.row_number, ())) for state in states]

    @staticmethod
    def _required_error(
        row: RawRow,
        row_number: int,
        column: str,
        rule_set: RuleSet,
    ) -> RowValidationError:
        return RowValidationError(
            row_number=row_number,
            column=column,
            message=f"{rule_set.display_name(column)} is required",
            value=row.get(column),
            severity=Severity.ERROR,
            code=FindingCode.REQUIRED_FIELD,
        )

    @staticmethod
    def _present_columns(
        rows: Sequence[RawRow],
        headers: Sequence[str] | None,
    ) -> Sequence[str] | None:
        if headers is not None:
            return list(headers)
        if rows:
            return list(rows[0].keys())
        return None
