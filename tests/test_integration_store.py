"""tests/test_integration_store.py — Unit tests for the integration registry"""
import threading

import pytest

from errors import NotFound
from models.analysis_result import AnalysisResult, AnalysisStatus
from models.integration import (
    IntegrationConfig, IntegrationStatus, NotificationSettings, SystemType,
)


def test_create_sets_active_and_generates_credentials(store):
    integration = store.create("Shop1", SystemType.REST_API)
    assert integration.status is IntegrationStatus.ACTIVE
    assert integration.api_key.startswith("json_oracle_")
    assert len(integration.api_key) == len("json_oracle_") + 32
    assert integration.created_at.tzinfo is not None
    assert integration.last_activity_at is None


def test_ids_and_keys_pairwise_distinct(store):
    created = [store.create(f"sys{i}", SystemType.CUSTOM) for i in range(200)]
    assert len({i.id for i in created}) == 200
    assert len({i.api_key for i in created}) == 200


def test_concurrent_creates_stay_unique(store):
    created = []
    lock = threading.Lock()

    def worker():
        for n in range(25):
            integration = store.create(f"w{n}", SystemType.WEBHOOK)
            with lock:
                created.append(integration)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 200
    assert len({i.api_key for i in created}) == 200


def test_get_by_api_key_returns_owner_of_key(store):
    a = store.create("A", SystemType.DATABASE)
    b = store.create("B", SystemType.FILE_SYSTEM)
    assert store.get_by_api_key(a.api_key).id == a.id
    assert store.get_by_api_key(b.api_key).id == b.id


def test_get_by_api_key_does_not_accept_ids(store):
    a = store.create("A", SystemType.DATABASE)
    with pytest.raises(NotFound):
        store.get_by_api_key(a.id)
    with pytest.raises(NotFound):
        store.get_by_api_key("bogus")


def test_get_by_id_unknown(store):
    with pytest.raises(NotFound):
        store.get_by_id("missing")


def test_list_filters_by_owner(store):
    store.create("anon", SystemType.CUSTOM)
    mine = store.create("mine", SystemType.CUSTOM, owner_id="user_1")
    store.create("theirs", SystemType.CUSTOM, owner_id="user_2")

    assert len(store.list()) == 3
    assert [i.id for i in store.list("user_1")] == [mine.id]
    assert store.list("nobody") == []


def test_delete_cascades_to_results(store, results):
    integration = store.create("gone", SystemType.MESSAGE_QUEUE)
    results.append(integration.id, AnalysisResult(
        id="r1", integration_id=integration.id, system_name="gone",
        status=AnalysisStatus.PENDING, created_at=integration.created_at,
    ))

    assert store.delete(integration.id) is True
    with pytest.raises(NotFound):
        store.get_by_id(integration.id)
    with pytest.raises(NotFound):
        store.get_by_api_key(integration.api_key)
    assert results.query(integration.id) == []
    assert integration.id not in results.snapshot()


def test_delete_absent_is_noop(store):
    assert store.delete("never-existed") is False


def test_set_status_and_touch(store):
    integration = store.create("x", SystemType.REST_API)
    updated = store.set_status(integration.id, IntegrationStatus.INACTIVE)
    assert updated.status is IntegrationStatus.INACTIVE
    # records handed out earlier are snapshots
    assert integration.status is IntegrationStatus.ACTIVE

    touched = store.touch(integration.id)
    assert touched.last_activity_at is not None
    assert store.get_by_api_key(integration.api_key).last_activity_at == touched.last_activity_at


def test_set_status_unknown(store):
    with pytest.raises(NotFound):
        store.set_status("missing", IntegrationStatus.ACTIVE)


def test_notification_webhook_respects_toggle(store):
    on = store.create("on", SystemType.WEBHOOK, webhook_url="http://hook/on")
    off = store.create(
        "off", SystemType.WEBHOOK, webhook_url="http://hook/off",
        configuration=IntegrationConfig(
            notification_settings=NotificationSettings(webhook_notifications=False)),
    )
    none = store.create("none", SystemType.WEBHOOK)
    assert on.notification_webhook() == "http://hook/on"
    assert off.notification_webhook() is None
    assert none.notification_webhook() is None


def test_list_with_results_pairs_each_integration_with_its_sequence(store, results):
    mine = store.create("mine", SystemType.CUSTOM, owner_id="user_1")
    store.create("theirs", SystemType.CUSTOM, owner_id="user_2")
    results.append(mine.id, AnalysisResult(
        id="r1", integration_id=mine.id, system_name="mine",
        status=AnalysisStatus.COMPLETED, created_at=mine.created_at,
    ))

    integrations, sequences = store.list_with_results("user_1")
    assert [i.id for i in integrations] == [mine.id]
    assert list(sequences) == [mine.id]
    assert [r.id for r in sequences[mine.id]] == ["r1"]


def test_list_with_results_excludes_concurrent_registry_writes(store, results):
    existing = store.create("existing", SystemType.REST_API)
    created = threading.Event()
    workers = []
    read_log = results.snapshot

    def snapshot_while_creating():
        def create_late():
            store.create("late", SystemType.REST_API)
            created.set()
        worker = threading.Thread(target=create_late)
        worker.start()
        workers.append(worker)
        assert not created.wait(0.2)
        return read_log()

    results.snapshot = snapshot_while_creating
    integrations, sequences = store.list_with_results()
    del results.snapshot

    assert [i.id for i in integrations] == [existing.id]
    assert set(sequences) == {existing.id}
    assert created.wait(5)
    workers[0].join()
    assert len(store.list()) == 2
