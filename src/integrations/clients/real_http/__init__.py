"""
Real HTTP integration clients.

These clients talk to live systems over HTTP:
- the Mojaloop SDK scheme adapter outbound API
- operator CBS APIs, once registered in REAL_CBS_CLIENTS

Important:
- Must implement the same interfaces as the mock clients
- Must raise the connector error types (src/domain/errors.py) on failure

Switching:
The selection of mock vs real clients happens in src/api/main.py only.
"""

from typing import Dict, Type

from src.integrations.contracts.interfaces import CoreBankingClient

# Operator name -> live CBS client. Empty until an operator integration ships.
REAL_CBS_CLIENTS: Dict[str, Type[CoreBankingClient]] = {}
