"""
app/mappers/header_mapper.py

Resolves incoming CSV headers to rule-set column keys.

A header matches a column when its normalized form equals the normalized
key, display name or template label of that column, so files built from
the downloadable template, files using short names and files using raw
keys are all accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from app.domain.tabular import (
    HEADER_ROW_NUMBER,
    FindingCode,
    RowValidationError,
    RuleSet,
    Severity,
)


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.
    """

    return "".join(ch for ch in header.strip().lower() if ch.isalnum())


@dataclass(frozen=True)
class HeaderResolution:
    """
    Final resolved header mapping.
    """

    source_to_column: dict[str, str]
    source_headers: tuple[str, ...]
    unknown_headers: tuple[str, ...] = ()

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.source_to_column.values())

    def unknown_header_findings(self) -> list[RowValidationError]:
        return [
            RowValidationError(
                row_number=HEADER_ROW_NUMBER,
                column=header,
                message=f"Column '{header}' is not recognised and will be ignored",
                value=header,
                severity=Severity.INFO,
                code=FindingCode.UNKNOWN_COLUMN,
            )
            for header in self.unknown_headers
        ]


class HeaderMapper:
    """
    Maps source headers and raw rows onto the columns of one rule set.
    """

    def __init__(self, rule_set: RuleSet) -> None:
        self._lookup: dict[str, str] = {}
        for column in rule_set.columns:
            for alias in (column, rule_set.display_name(column), rule_set.header_label(column)):
                normalized = normalize_header(alias)
                if normalized:
                    self._lookup.setdefault(normalized, column)

    def resolve(self, headers: Sequence[str]) -> HeaderResolution:
        """
        Resolve headers in order; the first header claiming a column wins.
        """

        source_to_column: dict[str, str] = {}
        claimed: set[str] = set()
        unknown: list[str] = []
        for header in headers:
            if header is None or not header.strip():
                continue
            column = self._lookup.get(normalize_header(header))
            if column is None or column in claimed:
                unknown.append(header)
                continue
            source_to_column[header] = column
            claimed.add(column)

        return HeaderResolution(
            source_to_column=source_to_column,
            source_headers=tuple(headers),
            unknown_headers=tuple(unknown),
        )

    @staticmethod
    def map_row(raw_row: Mapping[str, Any], resolution: HeaderResolution) -> dict[str, Any]:
        """
        Re-key a raw row by column key, dropping unresolved headers.
        """

        mapped: dict[str, Any] = {}
        for header, column in resolution.source_to_column.items():
            value = raw_row.get(header)
            mapped[column] = value.strip() if isinstance(value, str) else value
        return mapped
