"""
SDK-facing endpoints (scheme adapter backend API).

The scheme adapter calls these when this DFSP is the payee: party lookup,
quote, transfer reservation and the final transfer notification.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_connector
from src.domain.connector import CoreConnector
from src.domain.models import QuoteRequest, TransferPatchNotification, TransferRequest

sdk_api = APIRouter()


@sdk_api.get("/parties/{id_type}/{id_value}", tags=["SDK"])
async def get_party(id_type: str, id_value: str, connector: CoreConnector = Depends(get_connector)) -> Dict[str, Any]:
    party = await connector.get_party(id_type, id_value)
    return party.to_wire()


@sdk_api.post("/quoterequests", tags=["SDK"])
async def quote_request(request: QuoteRequest, connector: CoreConnector = Depends(get_connector)) -> Dict[str, Any]:
    quote = await connector.quote(request)
    return quote.to_wire()


@sdk_api.post("/transfers", status_code=status.HTTP_201_CREATED, tags=["SDK"])
async def reserve_transfer(
    request: TransferRequest, connector: CoreConnector = Depends(get_connector)
) -> Dict[str, Any]:
    response = await connector.reserve_transfer(request)
    return response.to_wire()


@sdk_api.put("/transfers/{transfer_id}", tags=["SDK"])
async def finalize_transfer(
    transfer_id: str,
    notification: TransferPatchNotification,
    connector: CoreConnector = Depends(get_connector),
) -> Dict[str, Any]:
    await connector.finalize_transfer(notification, transfer_id)
    return {"transferId": transfer_id, "status": "COMMITTED"}
