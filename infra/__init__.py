"""
Infrastructure module exports.

Configuration and wiring for the AI gateway.
"""

from .config import InfraConfig, ProviderType, get_config, get_gateway

__all__ = [
    "InfraConfig",
    "ProviderType",
    "get_config",
    "get_gateway",
]
