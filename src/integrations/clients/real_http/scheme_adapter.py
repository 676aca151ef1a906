"""
Real Scheme Adapter HTTP Client.

Talks to the Mojaloop SDK scheme adapter outbound API:
- POST /transfers            start a transfer (party lookup, quote, FX)
- PUT  /transfers/{id}       accept / reject conversion terms or the quote

Used when INTEGRATIONS_MODE=real; wired in src/api/main.py.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx

from src.domain.errors import SchemeAdapterError
from src.domain.models import OutboundTransferRequest, OutboundTransferResponse, TransferContinuation
from src.integrations.contracts.interfaces import SchemeAdapterClient
from src.integrations.policy.response_wrappers import normalize_outbound_transfer_response

logger = logging.getLogger(__name__)


class RealSchemeAdapterClient(SchemeAdapterClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("SDK_BASE_URL", "")).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def initiate_outbound_transfer(self, request: OutboundTransferRequest) -> OutboundTransferResponse:
        logger.info("POST /transfers home_transaction_id=%s", request.home_transaction_id)
        data = await self._send("POST", "/transfers", request.to_wire())
        return normalize_outbound_transfer_response(data)

    async def continue_outbound_transfer(
        self, transfer_id: str, continuation: TransferContinuation
    ) -> OutboundTransferResponse:
        logger.info("PUT /transfers/%s %s", transfer_id, continuation.to_wire())
        data = await self._send("PUT", f"/transfers/{transfer_id}", continuation.to_wire())
        return normalize_outbound_transfer_response(data)

    async def _send(self, method: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.base_url:
            raise SchemeAdapterError("SDK_BASE_URL is not configured.")

        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.request(method, url, json=payload)
                response.raise_for_status()
                return response.json() if response.content else {}
        except httpx.HTTPStatusError as exc:
            logger.error("Scheme adapter %s %s returned %s", method, path, exc.response.status_code)
            raise SchemeAdapterError(
                f"Scheme adapter {method} {path} failed with HTTP {exc.response.status_code}",
                payload=_error_body(exc.response),
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Scheme adapter %s %s unreachable: %s", method, path, exc)
            raise SchemeAdapterError(f"Scheme adapter unreachable: {exc}") from exc
        except ValueError as exc:
            raise SchemeAdapterError(f"Scheme adapter returned invalid JSON for {method} {path}") from exc


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"body": response.text}
    return body if isinstance(body, dict) else {"body": body}
