"""
Run a worker CSV import from the CLI.
"""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from pathlib import Path
from typing import Sequence

from app.api.routers.worker_csv import get_worker_gateway
from app.domain.errors import InvalidImportModeError
from app.schemas.worker_import import WorkerImportResponse, WorkerValidationReportResponse
from app.services.worker_import_service import IMPORT_MODES, get_worker_import_service
from db.session import SessionLocal


def parse_organization_id(raw: str) -> str:
    """
    Canonical lowercase form of a UUID, the form stored worker rows carry.
    """

    try:
        return str(uuid.UUID(raw.strip()))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid organization id {raw!r}: expected a UUID"
        ) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate or import a worker CSV file.")
    parser.add_argument("path", type=Path, help="CSV file to read.")
    parser.add_argument(
        "--organization-id",
        dest="organization_id",
        type=parse_organization_id,
        default=None,
        help="Organization UUID the workers belong to. Required unless --validate-only.",
    )
    parser.add_argument(
        "--mode",
        dest="mode",
        default="create",
        help=f"Import mode: {', '.join(IMPORT_MODES)}.",
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Validate and transform only; nothing is persisted.",
    )
    parser.add_argument(
        "--validate-only",
        dest="validate_only",
        action="store_true",
        help="Print the validation report and exit without touching the database.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    content = args.path.read_bytes()
    service = get_worker_import_service()

    if args.validate_only:
        result = service.validate_file(content)
        payload = WorkerValidationReportResponse.from_result(result).model_dump(mode="json")
        print(json.dumps(payload, indent=2))
        return 0 if result.success else 1

    if not args.organization_id:
        parser.error("--organization-id is required unless --validate-only is given")

    with SessionLocal() as db:
        try:
            import_result = service.import_file(
                content,
                args.organization_id,
                args.mode,
                args.dry_run,
                gateway=get_worker_gateway(db),
            )
        except InvalidImportModeError as exc:
            print(str(exc), file=sys.stderr)
            return 2

    payload = WorkerImportResponse.from_result(import_result).model_dump(mode="json")
    print(json.dumps(payload, indent=2))
    return 1 if import_result.validation_failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
