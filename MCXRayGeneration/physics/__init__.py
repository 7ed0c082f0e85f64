"""Physics modules for Bremsstrahlung X-ray generation."""

from .bremsstrahlung import CrossSectionProvider, KramersBremsstrahlung
from .bremsstrahlung_database import TabulatedBremsstrahlung, BremsstrahlungDatabase
from .cross_section_cache import ElementCrossSectionCache
from .xray_generation import BremsstrahlungXRayGeneration

__all__ = [
    'CrossSectionProvider',
    'KramersBremsstrahlung',
    'TabulatedBremsstrahlung',
    'BremsstrahlungDatabase',
    'ElementCrossSectionCache',
    'BremsstrahlungXRayGeneration'
]
