"""Utility modules for configuration, logging, and validation."""

from .logging import setup_logger, get_logger
from .config import GenerationConfig
from .validation import (
    ValidationError,
    InvalidConfigurationError,
    TransportContractError,
    InvalidMaterialError,
    validate_config,
    validate_transport_event,
    validate_material
)

__all__ = [
    'GenerationConfig',
    'setup_logger',
    'get_logger',
    'ValidationError',
    'InvalidConfigurationError',
    'TransportContractError',
    'InvalidMaterialError',
    'validate_config',
    'validate_transport_event',
    'validate_material'
]
