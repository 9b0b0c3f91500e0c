from datetime import datetime, timedelta, timezone

from host_registry.db import HostStoreError
from host_registry.models.host import Host
from host_registry.services import host_sweeper

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


def make_host(host_id, age_ms=None, **fields):
    document = {"_id": host_id, **fields}
    if age_ms is not None:
        document["updatedAt"] = NOW - timedelta(milliseconds=age_ms)
    return Host.model_validate(document)


def test_split_expired_uses_threshold():
    hosts = [make_host("a", 10), make_host("b", 500000)]

    active, expired_ids = host_sweeper.split_expired(hosts, now=NOW, stale_after_ms=432000)

    assert [host.id for host in active] == ["a"]
    assert expired_ids == ["b"]


def test_threshold_is_measured_in_milliseconds():
    # 432000 ms is 7.2 minutes
    assert host_sweeper.is_expired(make_host("a", 7 * 60 * 1000), NOW, 432000) is False
    assert host_sweeper.is_expired(make_host("b", 8 * 60 * 1000), NOW, 432000) is True


def test_host_exactly_at_threshold_is_kept():
    host = make_host("a", 432000)

    assert host_sweeper.is_expired(host, NOW, 432000) is False
    assert host_sweeper.is_expired(make_host("b", 432001), NOW, 432000) is True


def test_host_without_timestamp_never_expires():
    host = make_host("legacy")

    assert host_sweeper.is_expired(host, NOW, 0) is False


def test_naive_timestamp_is_read_as_utc():
    host = Host.model_validate({"_id": "a", "updatedAt": datetime(2025, 1, 10, 11, 0)})

    assert host_sweeper.is_expired(host, NOW, 432000) is True


def test_split_expired_defaults_to_settings(monkeypatch):
    class DummySettings:
        host_stale_after_ms = 60000

    monkeypatch.setattr(host_sweeper, "get_settings", lambda: DummySettings())

    active, expired_ids = host_sweeper.split_expired(
        [make_host("a", 30000), make_host("b", 90000)], now=NOW
    )

    assert [host.id for host in active] == ["a"]
    assert expired_ids == ["b"]


def test_discard_host_swallows_store_errors():
    class FailingRepository:
        def __init__(self):
            self.calls = []

        def delete_by_id(self, host_id):
            self.calls.append(host_id)
            raise HostStoreError("network down")

    repository = FailingRepository()

    host_sweeper.discard_host(repository, "b")

    assert repository.calls == ["b"]
