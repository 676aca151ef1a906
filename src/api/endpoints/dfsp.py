"""
DFSP-facing endpoints: the payer side of an outbound transfer and the CBS
settlement callback.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from src.api.dependencies import get_connector
from src.domain.connector import CoreConnector
from src.domain.models import CallbackPayload, SendMoneyConfirmation, SendMoneyRequest

dfsp_api = APIRouter()


@dfsp_api.post("/send-money", tags=["DFSP"])
async def send_money(request: SendMoneyRequest, connector: CoreConnector = Depends(get_connector)) -> Dict[str, Any]:
    response = await connector.send_money(request)
    return response.to_wire()


@dfsp_api.put("/send-money/{transfer_id}", tags=["DFSP"])
async def confirm_send_money(
    transfer_id: str,
    confirmation: SendMoneyConfirmation,
    connector: CoreConnector = Depends(get_connector),
) -> Dict[str, Any]:
    result = await connector.confirm_send_money(confirmation, transfer_id)
    return result.to_wire()


@dfsp_api.post("/callback", tags=["DFSP"])
async def settlement_callback(
    payload: CallbackPayload, connector: CoreConnector = Depends(get_connector)
) -> Dict[str, Any]:
    outcome = await connector.handle_callback(payload)
    return {
        "transactionId": outcome.transfer_id,
        "accepted": outcome.accepted,
        "notified": outcome.notified,
        "refunded": outcome.refunded,
    }
