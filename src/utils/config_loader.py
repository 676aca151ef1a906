"""
Configuration loader for the core connector
"""

import logging
import os
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)


class FeePolicy(str, Enum):
    """How the payee fee affects the quoted transfer amount."""

    ADD_FEE = "add_fee"              # transferAmount = amount + fee
    PASS_THROUGH = "pass_through"    # transferAmount = amount


class OperatorProfile(BaseModel):
    """Per-operator settings injected into every service"""

    name: str
    supported_id_type: str = "MSISDN"
    currency: str
    country: str
    fsp_id: str
    lei: str = ""
    service_charge_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    expiration_hours: int = Field(default=24, gt=0)
    fee_policy: FeePolicy = FeePolicy.PASS_THROUGH
    barred_account_statuses: List[str] = Field(default_factory=list)
    callback_success_codes: List[str] = Field(default_factory=lambda: ["SUCCESS"])
    settlement_mode: Literal["callback", "poll"] = "callback"
    transaction_enquiry_wait_seconds: float = Field(default=5.0, ge=0.0)
    transaction_enquiry_max_attempts: int = Field(default=3, ge=1, le=20)
    merchant_classification_code: str = "123"
    wallet_type: str = "NORMAL"

    def is_barred_status(self, account_status: str) -> bool:
        wanted = (account_status or "").strip().upper()
        return any(wanted == status.strip().upper() for status in self.barred_account_statuses)

    def is_success_code(self, status_code: str) -> bool:
        wanted = (status_code or "").strip().upper()
        return any(wanted == code.strip().upper() for code in self.callback_success_codes)


class SchemeAdapterConfig(BaseModel):
    """SDK scheme adapter outbound API"""

    base_url: str = "http://localhost:4001"
    timeout_seconds: float = Field(default=20.0, gt=0)


class ConnectorConfig(BaseModel):
    """Complete connector configuration"""

    operator: str
    operators: Dict[str, OperatorProfile]
    scheme_adapter: SchemeAdapterConfig = Field(default_factory=SchemeAdapterConfig)
    pending_transfer_ttl_seconds: int = Field(default=3600, ge=60)

    @model_validator(mode="after")
    def _operator_must_be_configured(self) -> "ConnectorConfig":
        if self.operator not in self.operators:
            raise ValueError(
                f"Operator '{self.operator}' is not configured. Known operators: {', '.join(sorted(self.operators))}"
            )
        return self

    @property
    def profile(self) -> OperatorProfile:
        return self.operators[self.operator]


def load_connector_config(config_path: Optional[Path] = None) -> ConnectorConfig:
    """
    Load and validate connector configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to config/connector_config.yml

    Environment overrides:
        CONNECTOR_OPERATOR: selects the active operator profile
        SDK_BASE_URL: scheme adapter outbound API base URL

    Returns:
        Validated ConnectorConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "connector_config.yml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    for name, profile in (config_data.get("operators") or {}).items():
        if isinstance(profile, dict):
            profile.setdefault("name", name)

    operator = os.getenv("CONNECTOR_OPERATOR")
    if operator:
        config_data["operator"] = operator.strip().lower()

    sdk_base_url = os.getenv("SDK_BASE_URL")
    if sdk_base_url:
        config_data.setdefault("scheme_adapter", {})["base_url"] = sdk_base_url

    try:
        config = ConnectorConfig(**config_data)
        logger.info("Loaded connector config from %s (operator=%s)", config_path, config.operator)
        return config
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise
