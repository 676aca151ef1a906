"""
Utility modules for the core connector
"""
from .config_loader import ConnectorConfig, FeePolicy, OperatorProfile, load_connector_config

__all__ = [
    'ConnectorConfig',
    'FeePolicy',
    'OperatorProfile',
    'load_connector_config',
]
