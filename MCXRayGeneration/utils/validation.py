"""Validation utilities for configuration and transport driver input."""

from pathlib import Path

import numpy as np

from .config import GenerationConfig
from .logging import get_logger
from ..core.data_models import TransportEvent, TransportStep, MaterialComposition


logger = get_logger()


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class InvalidConfigurationError(ValidationError):
    """Raised when configuration parameters are invalid."""
    pass


class TransportContractError(ValidationError):
    """Raised when the transport driver delivers a malformed notification."""
    pass


class InvalidMaterialError(ValidationError):
    """Raised when a material composition cannot be used."""
    pass


def validate_config(config: GenerationConfig) -> None:
    """Validate runtime prerequisites of a generation configuration.

    Args:
        config: Generation configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    try:
        # Parameter ranges are checked in __post_init__
        if config.cross_section_database_path:
            xs_path = Path(config.cross_section_database_path)
            if not xs_path.exists():
                logger.warning(
                    f"Bremsstrahlung database not found: {config.cross_section_database_path}"
                )

        if config.device == 'cuda':
            import torch
            if not torch.cuda.is_available():
                raise InvalidConfigurationError(
                    "CUDA device requested but CUDA is not available. "
                    "Set device='cpu' or install CUDA support."
                )

        logger.debug("Configuration validation passed")

    except Exception as e:
        if isinstance(e, InvalidConfigurationError):
            raise
        raise InvalidConfigurationError(f"Configuration validation failed: {str(e)}")


def validate_transport_event(event: TransportEvent) -> None:
    """Check that a step notification carries everything the sampler reads.

    Args:
        event: Notification delivered by the transport driver

    Raises:
        TransportContractError: If the notification is malformed
    """
    if not isinstance(event, TransportEvent):
        raise TransportContractError(
            f"Expected a TransportEvent, got {type(event).__name__}"
        )

    if not event.is_step:
        return

    if not isinstance(event.step, TransportStep):
        raise TransportContractError(
            f"Step event {event.event_id} carries no transport step snapshot"
        )

    if not isinstance(event.material, MaterialComposition):
        raise TransportContractError(
            f"Step event {event.event_id} carries no material composition"
        )

    step = event.step
    if not (np.all(np.isfinite(step.prev_position)) and np.all(np.isfinite(step.position))):
        raise TransportContractError(f"Step event {event.event_id} has non-finite positions")

    if not (np.isfinite(step.prev_energy) and np.isfinite(step.energy)):
        raise TransportContractError(
            f"Step event {event.event_id} has non-finite kinetic energies"
        )


def validate_material(material: MaterialComposition) -> None:
    """Validate number densities of a material composition.

    Negative densities are rejected here so that materials built outside
    the transport loop fail early; during sampling they are only excluded.

    Raises:
        InvalidMaterialError: If a density is negative or not finite
    """
    for element, density in material.number_densities.items():
        if not np.isfinite(density) or density < 0:
            raise InvalidMaterialError(
                f"Material {material.name}: invalid number density {density} for {element}"
            )
