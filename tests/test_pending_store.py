import json

import redis

from src.database import redis_real
from src.database.redis import PendingTransferStore


def test_in_memory_store_returns_copies():
    store = PendingTransferStore()
    store.save("t-1", {"amount": "100"})

    data = store.get("t-1")
    data["amount"] = "999"

    assert store.get("t-1") == {"amount": "100"}


def test_in_memory_update_ignores_unknown_ids():
    store = PendingTransferStore()
    store.update("missing", {"state": "x"})
    store.save("t-1", {"amount": "100"})
    store.update("t-1", {"cbs_reference": "AM1"})

    assert store.get("missing") is None
    assert store.get("t-1") == {"amount": "100", "cbs_reference": "AM1"}


def test_in_memory_pop_consumes_once():
    store = PendingTransferStore()
    store.save("t-1", {"amount": "100"})

    assert store.pop("t-1") == {"amount": "100"}
    assert store.pop("t-1") is None
    assert store.ping() is True


class FakeRedis:
    """Just enough of the redis client surface used by the store."""

    def __init__(self, healthy=True):
        self.values = {}
        self.ttls = {}
        self.healthy = healthy

    def setex(self, key, ttl, value):
        self.values[key] = value
        self.ttls[key] = ttl

    def get(self, key):
        return self.values.get(key)

    def getdel(self, key):
        return self.values.pop(key, None)

    def ping(self):
        if not self.healthy:
            raise redis.ConnectionError("down")
        return True


def _redis_store(monkeypatch, fake):
    monkeypatch.setattr(redis_real.redis, "from_url", lambda url, decode_responses: fake)
    return redis_real.PendingTransferStore("redis://localhost:6379/0", default_ttl=120)


def test_redis_store_serializes_with_prefix(monkeypatch):
    fake = FakeRedis()
    store = _redis_store(monkeypatch, fake)

    store.save("t-1", {"amount": "100"}, ttl=60)

    assert json.loads(fake.values["pending_transfer:t-1"]) == {"amount": "100"}
    assert fake.ttls["pending_transfer:t-1"] == 60
    assert store.get("t-1") == {"amount": "100"}


def test_redis_store_update_and_pop(monkeypatch):
    fake = FakeRedis()
    store = _redis_store(monkeypatch, fake)
    store.save("t-1", {"amount": "100"})

    store.update("t-1", {"cbs_reference": "AM1"})

    assert store.pop("t-1") == {"amount": "100", "cbs_reference": "AM1"}
    assert store.pop("t-1") is None


def test_redis_store_ping_reports_failures(monkeypatch):
    store = _redis_store(monkeypatch, FakeRedis(healthy=False))

    assert store.ping() is False
