"""
Bremsstrahlung X-ray Generation for Electron Monte Carlo Transport

Turns the steps of a simulated electron trajectory into weighted continuum
X-ray photon emissions and publishes them to listeners.
"""

__version__ = "0.1.0"

from .physics.xray_generation import BremsstrahlungXRayGeneration
from .core.data_models import (
    Element,
    MaterialComposition,
    TransportStep,
    TransportEvent,
    EmissionRecord,
    PhotonBank
)
from .utils.config import GenerationConfig

__all__ = [
    'BremsstrahlungXRayGeneration',
    'Element',
    'MaterialComposition',
    'TransportStep',
    'TransportEvent',
    'EmissionRecord',
    'PhotonBank',
    'GenerationConfig'
]
