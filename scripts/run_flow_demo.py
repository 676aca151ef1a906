#!/usr/bin/env python3
"""
Run an inbound (payee) and an outbound (payer) transfer against the mock
clients and print each stage to the terminal.

Usage (from repo root):
  python scripts/run_flow_demo.py
  CONNECTOR_OPERATOR=mtn python scripts/run_flow_demo.py

To serve the HTTP API instead:
  uvicorn src.api.main:app --host 127.0.0.1 --port 3003
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.database.redis import PendingTransferStore
from src.domain.amounts import format_amount, to_decimal
from src.domain.connector import build_connector
from src.domain.models import (
    CallbackPayload,
    QuoteRequest,
    SendMoneyConfirmation,
    SendMoneyRequest,
    TransferPatchNotification,
    TransferRequest,
)
from src.integrations.clients.mocks import MOCK_CBS_CLIENTS, MockSchemeAdapterClient
from src.utils.config_loader import load_connector_config

DEMO_WALLETS = {"airtel": "971938765", "mtn": "260961234567", "tnm": "265881234567"}


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main():
    setup_logging()
    config = load_connector_config()
    profile = config.profile
    wallet = DEMO_WALLETS[config.operator]
    connector = build_connector(
        profile,
        MOCK_CBS_CLIENTS[config.operator](),
        MockSchemeAdapterClient(payee_name="Demo Payee"),
        PendingTransferStore(),
    )

    # --- Inbound: party lookup ---
    party = await connector.get_party(profile.supported_id_type, wallet)
    print_stage("INBOUND: Party lookup", party.to_wire())

    # --- Inbound: quote ---
    transaction_id = str(uuid.uuid4())
    payee = {"idType": profile.supported_id_type, "idValue": wallet}
    payer = {"idType": "MSISDN", "idValue": "256700000001", "fspId": "demo-payer-fsp"}
    quote = await connector.quote(
        QuoteRequest.model_validate(
            {
                "quoteId": str(uuid.uuid4()),
                "transactionId": transaction_id,
                "to": payee,
                "from": payer,
                "amountType": "SEND",
                "amount": "100",
                "currency": profile.currency,
            }
        )
    )
    print_stage("INBOUND: Quote", quote.to_wire())

    # --- Inbound: transfer reservation and commit ---
    transfer_id = str(uuid.uuid4())
    reservation = await connector.reserve_transfer(
        TransferRequest.model_validate(
            {
                "transferId": transfer_id,
                "to": payee,
                "from": payer,
                "amountType": "SEND",
                "amount": quote.transfer_amount,
                "currency": profile.currency,
                "quote": {
                    "transferAmount": quote.transfer_amount,
                    "payeeFspCommissionAmount": quote.payee_fsp_commission_amount,
                    "payeeFspFeeAmount": quote.payee_fsp_fee_amount,
                    "payeeReceiveAmount": format_amount(
                        to_decimal(quote.transfer_amount) - to_decimal(quote.payee_fsp_fee_amount)
                    ),
                },
            }
        )
    )
    print_stage("INBOUND: Transfer reserved", reservation.to_wire())

    await connector.finalize_transfer(
        TransferPatchNotification.model_validate(
            {
                "currentState": "COMPLETED",
                "quoteRequest": {
                    "body": {
                        "transactionId": transaction_id,
                        "payee": {"partyIdInfo": {"partyIdType": "MSISDN", "partyIdentifier": wallet}},
                        "amount": {"amount": "100", "currency": profile.currency},
                    }
                },
            }
        ),
        transfer_id,
    )
    print_stage("INBOUND: Transfer committed", {"transferId": transfer_id})

    # --- Outbound: send money, confirm, settle ---
    sent = await connector.send_money(
        SendMoneyRequest(
            payer_id=wallet,
            payee_id="256700000002",
            payee_id_type="MSISDN",
            send_amount="250",
            send_currency=profile.currency,
        )
    )
    print_stage("OUTBOUND: Send money quote", sent.to_wire())

    confirmation = await connector.confirm_send_money(
        SendMoneyConfirmation(accept_quote=True, msisdn=wallet, amount="250"), sent.transaction_id
    )
    print_stage("OUTBOUND: Payer confirmed", confirmation.to_wire())

    if profile.settlement_mode == "callback":
        outcome = await connector.handle_callback(
            CallbackPayload(
                transaction_id=sent.transaction_id,
                status_code=profile.callback_success_codes[0],
                cbs_reference=confirmation.cbs_reference,
            )
        )
        print_stage("OUTBOUND: Settlement callback", outcome.__dict__)

    print("\n" + "=" * 60)
    print("  Demo complete. Check logs above for each stage.")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
