"""
Real Redis-backed pending-transfer store for production when REDIS_URL is
set. Implements the same interface as src.database.redis (in-memory stub).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import redis


class PendingTransferStore:
    """
    Redis-backed pending-transfer store. Use when REDIS_URL is set in production.
    """

    def __init__(self, url: str, default_ttl: int = 3600) -> None:
        self._client = redis.from_url(url, decode_responses=True)
        self._default_ttl = default_ttl

    def _key(self, transfer_id: str) -> str:
        return f"pending_transfer:{transfer_id}"

    def save(self, transfer_id: str, data: Dict[str, Any], ttl: int = 3600) -> None:
        payload = json.dumps(data, default=str)
        self._client.setex(self._key(transfer_id), ttl or self._default_ttl, payload)

    def get(self, transfer_id: str) -> Optional[Dict[str, Any]]:
        raw = self._client.get(self._key(transfer_id))
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def update(self, transfer_id: str, updates: Dict[str, Any]) -> None:
        existing = self.get(transfer_id)
        if not existing:
            return
        existing.update(updates)
        self.save(transfer_id, existing, ttl=self._default_ttl)

    def pop(self, transfer_id: str) -> Optional[Dict[str, Any]]:
        # GETDEL keeps "consumed exactly once" when several workers share the store.
        raw = self._client.getdel(self._key(transfer_id))
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def ping(self) -> bool:
        try:
            return self._client.ping()
        except redis.RedisError:
            return False
