from __future__ import annotations

from typing import Any, Dict

from pydantic import ValidationError

from src.domain.errors import SchemeAdapterError
from src.domain.models import OutboundTransferResponse

# States the SDK outbound API reports for a transfer in flight.
KNOWN_TRANSFER_STATES = {
    "WAITING_FOR_PARTY_ACCEPTANCE",
    "WAITING_FOR_CONVERSION_ACCEPTANCE",
    "WAITING_FOR_QUOTE_ACCEPTANCE",
    "COMPLETED",
    "ABORTED",
    "ERROR_OCCURRED",
}


def normalize_outbound_transfer_response(raw: Dict[str, Any]) -> OutboundTransferResponse:
    if not isinstance(raw, dict):
        raise SchemeAdapterError(f"Unexpected scheme adapter response: {raw!r}")

    state = str(_first_non_empty(raw, "currentState", "current_state")).strip().upper()
    if state not in KNOWN_TRANSFER_STATES:
        raise SchemeAdapterError(f"Unsupported transfer currentState '{state}'.", payload=raw)
    if state == "ERROR_OCCURRED":
        message = (raw.get("lastError") or {}).get("msg") or "Scheme adapter reported an error"
        raise SchemeAdapterError(str(message), payload=raw)

    payload = dict(raw)
    payload.pop("current_state", None)
    payload["currentState"] = state
    return _build_model(payload, raw)


def _first_non_empty(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    raise SchemeAdapterError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(payload: Dict[str, Any], raw: Dict[str, Any]) -> OutboundTransferResponse:
    try:
        return OutboundTransferResponse.model_validate(payload)
    except ValidationError as exc:
        raise SchemeAdapterError(f"Response validation failed: {exc}", payload=raw) from exc
