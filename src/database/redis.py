"""
Lightweight in-memory pending-transfer store for local development.

Holds the correlation between an outbound transfer id and the orchestration
state that produced it, so the CBS settlement callback can be matched to its
originating send-money request. Same interface as src.database.redis_real.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PendingTransferStore:
    def __init__(self) -> None:
        # Simple in-memory store: transfer_id -> orchestration state
        self._transfers: Dict[str, Dict[str, Any]] = {}

    def save(self, transfer_id: str, data: Dict[str, Any], ttl: int = 3600) -> None:
        # TTL is ignored in this in-memory implementation.
        self._transfers[transfer_id] = dict(data)

    def get(self, transfer_id: str) -> Optional[Dict[str, Any]]:
        data = self._transfers.get(transfer_id)
        return dict(data) if data is not None else None

    def update(self, transfer_id: str, updates: Dict[str, Any]) -> None:
        if transfer_id not in self._transfers:
            return
        self._transfers[transfer_id].update(updates)

    def pop(self, transfer_id: str) -> Optional[Dict[str, Any]]:
        return self._transfers.pop(transfer_id, None)

    def ping(self) -> bool:
        """
        Health check calls this; always True for the in-memory store.
        """
        return True
