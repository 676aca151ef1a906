"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- Operator CBS sandboxes are not reachable
- We want to run inbound and outbound transfers end-to-end without a scheme adapter

Important:
- Mock clients implement the SAME interfaces as the real clients
  (src/integrations/contracts/interfaces.py).

Switching to real:
Set INTEGRATIONS_MODE=real; the choice is made once, in src/api/main.py.
"""

from .airtel import AirtelMockClient
from .mtn import MTNMockClient
from .scheme_adapter import MockSchemeAdapterClient
from .tnm import TNMMockClient

MOCK_CBS_CLIENTS = {
    "airtel": AirtelMockClient,
    "mtn": MTNMockClient,
    "tnm": TNMMockClient,
}

__all__ = ["AirtelMockClient", "MTNMockClient", "TNMMockClient", "MockSchemeAdapterClient", "MOCK_CBS_CLIENTS"]
