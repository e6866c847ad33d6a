"""
tests/test_import_workers_csv_script.py

Command-line import entry point: argument handling and organization scoping.
"""

from __future__ import annotations

import argparse
import contextlib
import importlib.util
import json
from pathlib import Path
from types import ModuleType

import pytest

from app.domain.worker import ExistingWorker
from app.services.worker_import_service import WorkerImportService
from app.validators.worker_rules import build_worker_rule_set

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "import_workers_csv.py"


@pytest.fixture(scope="module")
def cli() -> ModuleType:
    spec = importlib.util.spec_from_file_location("import_workers_csv", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def csv_path(tmp_path: Path) -> Path:
    path = tmp_path / "workers.csv"
    path.write_text(
        "First Name,Last Name,Primary Phone Number,Is Active,External ID\r\n"
        "John,Doe,+911234567890,true,EMP001\r\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def wired(cli, monkeypatch, make_gateway, organization_id, fixed_today):
    gateway = make_gateway(
        [
            ExistingWorker(
                id="w-1",
                organization_id=organization_id,
                first_name="John",
                last_name="Doe",
                external_id="EMP001",
            )
        ]
    )
    service = WorkerImportService(
        batch_size=100,
        log_validation_errors=False,
        rule_set=build_worker_rule_set(today=lambda: fixed_today),
    )

    monkeypatch.setattr(cli, "SessionLocal", lambda: contextlib.nullcontext(object()))
    monkeypatch.setattr(cli, "get_worker_gateway", lambda db: gateway)
    monkeypatch.setattr(cli, "get_worker_import_service", lambda: service)
    return gateway


class TestParseOrganizationId:
    def test_uppercase_uuid_is_lowercased(self, cli, organization_id) -> None:
        assert cli.parse_organization_id(organization_id.upper()) == organization_id

    def test_surrounding_whitespace_is_ignored(self, cli, organization_id) -> None:
        assert cli.parse_organization_id(f"  {organization_id}\n") == organization_id

    def test_non_uuid_is_an_argument_error(self, cli) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="expected a UUID"):
            cli.parse_organization_id("acme-corp")


def test_bad_organization_id_exits_with_usage_error(cli, csv_path, wired, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(csv_path), "--organization-id", "acme-corp"])

    assert excinfo.value.code == 2
    assert "expected a UUID" in capsys.readouterr().err
    assert wired.calls == []


def test_missing_organization_id_exits_with_usage_error(cli, csv_path, wired) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(csv_path), "--mode", "update"])

    assert excinfo.value.code == 2


def test_uppercase_organization_id_still_matches_workers(
    cli, csv_path, wired, organization_id, capsys
) -> None:
    exit_code = cli.main(
        [str(csv_path), "--organization-id", organization_id.upper(), "--mode", "update"]
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["processed"] == 1
    assert payload["not_found"] == 0
    assert [worker_id for worker_id, _ in wired.updated] == ["w-1"]
    assert wired.updated[0][1].organization_id == organization_id


def test_validate_only_needs_no_organization(cli, csv_path, wired, capsys) -> None:
    exit_code = cli.main([str(csv_path), "--validate-only"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["success"] is True
    assert wired.calls == []
