import threading

import pytest

from openbadger.counters import NODE_HEARTBEATS_TOTAL, OBSERVATIONS_ACCEPTED_TOTAL, Counter, snapshot


def test_snapshot_lists_known_counters():
    names = snapshot()
    for name in (
        "openbadger_credential_profiles_created_total",
        "openbadger_node_heartbeats_total",
        "openbadger_observation_batches_total",
        "openbadger_observations_accepted_total",
        "openbadger_scheduled_jobs_created_total",
        "openbadger_observation_retention_runs_total",
        "openbadger_observations_deleted_total",
    ):
        assert name in names


def test_add_increments_value_and_snapshot():
    before = OBSERVATIONS_ACCEPTED_TOTAL.value
    OBSERVATIONS_ACCEPTED_TOTAL.add(5)
    assert OBSERVATIONS_ACCEPTED_TOTAL.value == before + 5
    assert snapshot()["openbadger_observations_accepted_total"] == before + 5


def test_new_counter_starts_empty():
    counter = Counter("test_counters_fresh")
    assert counter.value == 0
    assert counter.name == "test_counters_fresh"
    assert snapshot()["test_counters_fresh"] == 0


def test_duplicate_name_is_rejected():
    with pytest.raises(ValueError, match="openbadger_node_heartbeats_total"):
        Counter(NODE_HEARTBEATS_TOTAL.name)


def test_concurrent_adds_are_not_lost():
    counter = Counter("test_counters_concurrent")

    def work():
        for _ in range(1000):
            counter.add(1)

    threads = [threading.Thread(target=work) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert counter.value == 4 * 1000