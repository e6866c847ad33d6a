"""
tests/test_batch_executor.py

Best-effort batch execution and per-record outcome accounting.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.domain.worker import CreateOperation, UpdateOperation, WorkerContact, WorkerRecord
from app.services.batch_executor import BatchExecutor, chunked


def _record(organization_id: str, index: int) -> WorkerRecord:
    return WorkerRecord(
        organization_id=organization_id,
        first_name=f"Worker{index}",
        last_name="Test",
        contact=WorkerContact(primary_phone_number=f"+91{index:010d}"),
    )


def _creates(organization_id: str, count: int) -> list[CreateOperation]:
    return [CreateOperation(record=_record(organization_id, i)) for i in range(1, count + 1)]


def test_chunked_keeps_order_and_remainder() -> None:
    chunks = list(chunked(list(range(5)), 2))

    assert chunks == [[0, 1], [2, 3], [4]]


def test_creates_are_sent_in_batches(make_gateway, organization_id) -> None:
    gateway = make_gateway()

    outcome = BatchExecutor(gateway).execute(_creates(organization_id, 5), batch_size=2)

    assert gateway.create_batches == [2, 2, 1]
    assert len(outcome.successful) == 5
    assert outcome.failed == ()
    assert [entry.id for entry in outcome.successful] == [f"worker-{i}" for i in range(1, 6)]
    assert outcome.successful[0].label == "Worker1 Test"


def test_failing_create_batch_is_attributed_to_all_of_its_records(
    make_gateway, organization_id
) -> None:
    gateway = make_gateway(fail_create_calls={2})

    outcome = BatchExecutor(gateway).execute(_creates(organization_id, 5), batch_size=2)

    assert [entry.label for entry in outcome.failed] == ["Worker3 Test", "Worker4 Test"]
    assert all(entry.id is None for entry in outcome.failed)
    assert all(entry.error_message == "bulk insert failed" for entry in outcome.failed)
    assert [entry.label for entry in outcome.successful] == [
        "Worker1 Test",
        "Worker2 Test",
        "Worker5 Test",
    ]


def test_one_failing_update_does_not_block_the_rest(make_gateway, organization_id) -> None:
    gateway = make_gateway(fail_update_ids={"w-3"})
    operations = [
        UpdateOperation(worker_id=f"w-{i}", record=_record(organization_id, i))
        for i in range(1, 6)
    ]

    outcome = BatchExecutor(gateway).execute(operations, batch_size=2)

    assert len(outcome.successful) == 4
    assert len(outcome.failed) == 1
    failure = outcome.failed[0]
    assert failure.id == "w-3"
    assert failure.label == "Worker3 Test"
    assert failure.error_message == "update rejected for w-3"
    assert [worker_id for worker_id, _ in gateway.updated] == ["w-1", "w-2", "w-4", "w-5"]


def test_every_operation_is_accounted_for_once(make_gateway, organization_id) -> None:
    gateway = make_gateway(fail_create_calls={1})
    operations = _creates(organization_id, 3)

    outcome = BatchExecutor(gateway).execute(operations, batch_size=10)

    assert len(outcome.successful) + len(outcome.failed) == len(operations)
    assert outcome.successful == ()


class _ShortGateway:
    def __init__(self) -> None:
        self.calls = 0

    def bulk_create(self, records: Sequence[WorkerRecord]) -> list[str]:
        self.calls += 1
        return ["only-one"]


def test_short_id_list_counts_as_failure(organization_id) -> None:
    outcome = BatchExecutor(_ShortGateway()).execute(_creates(organization_id, 2))

    assert outcome.successful == ()
    assert len(outcome.failed) == 2
    assert "returned 1 ids for 2 records" in outcome.failed[0].error_message


def test_nothing_to_do(make_gateway) -> None:
    gateway = make_gateway()

    outcome = BatchExecutor(gateway).execute([])

    assert outcome.successful == () and outcome.failed == ()
    assert gateway.calls == []
