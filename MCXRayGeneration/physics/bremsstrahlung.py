"""Bremsstrahlung cross-section providers for single elements."""

from abc import ABC, abstractmethod

import numpy as np

from ..core.data_models import Element
from ..utils.logging import get_logger
from .constants import KRAMERS_CROSS_SECTION_CONSTANT, DEFAULT_LOW_ENERGY_CUT_EV


logger = get_logger()


class CrossSectionProvider(ABC):
    """Bremsstrahlung cross section and photon energy sampler for one element.

    Both queries are pure functions of their arguments and the element.

    Attributes:
        element: Element this provider describes
    """

    def __init__(self, element: Element):
        self.element = element

    @abstractmethod
    def sigma(self, energy: float) -> float:
        """Total Bremsstrahlung cross section in m² at electron kinetic energy (eV)."""

    @abstractmethod
    def randomized_energy(self, kinetic_energy: float, uniform_draw: float) -> float:
        """Photon energy in eV for a uniform draw in [0, 1).

        Args:
            kinetic_energy: Electron kinetic energy in eV
            uniform_draw: Uniform random number in [0, 1)

        Returns:
            Sampled photon energy in eV
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.element.symbol})"


class KramersBremsstrahlung(CrossSectionProvider):
    """Thin-target Kramers model.

    The radiated intensity per unit photon energy is constant up to the
    electron kinetic energy, so the photon number spectrum falls as 1/k:

        dσ/dk = C Z(Z+1) / k,   k_cut < k < E
        σ(E)  = C Z(Z+1) ln(E / k_cut)

    with C = 16/3 α r_e². The Z(Z+1) factor adds electron-electron
    Bremsstrahlung to the nuclear term. The photon energy cut k_cut keeps
    the integral finite; it should sit well below the minimum photon energy
    the sampler accepts.

    Attributes:
        element: Element this provider describes
        low_energy_cut: Photon energy cut k_cut in eV
        prefactor: C Z(Z+1) in m²
    """

    def __init__(self, element: Element, low_energy_cut: float = DEFAULT_LOW_ENERGY_CUT_EV):
        super().__init__(element)
        if low_energy_cut <= 0:
            raise ValueError(f"low_energy_cut must be positive, got {low_energy_cut}")
        self.low_energy_cut = low_energy_cut
        z = element.atomic_number
        self.prefactor = KRAMERS_CROSS_SECTION_CONSTANT * z * (z + 1)
        logger.debug(
            f"KramersBremsstrahlung initialized for {element.symbol}: "
            f"Z={z}, k_cut={low_energy_cut} eV"
        )

    def sigma(self, energy: float) -> float:
        if energy <= self.low_energy_cut:
            return 0.0
        return float(self.prefactor * np.log(energy / self.low_energy_cut))

    def randomized_energy(self, kinetic_energy: float, uniform_draw: float) -> float:
        if kinetic_energy <= self.low_energy_cut:
            return 0.0
        # Inverse of the log-uniform CDF
        return float(self.low_energy_cut * (kinetic_energy / self.low_energy_cut) ** uniform_draw)

    def cumulative_fraction(self, kinetic_energy: float, photon_energy):
        """Fraction of emitted photons with energy below ``photon_energy``.

        Args:
            kinetic_energy: Electron kinetic energy in eV
            photon_energy: Photon energy (scalar or array) in eV

        Returns:
            CDF value(s) in [0, 1]
        """
        if kinetic_energy <= self.low_energy_cut:
            return np.zeros_like(np.asarray(photon_energy, dtype=np.float64))
        k = np.clip(np.asarray(photon_energy, dtype=np.float64), self.low_energy_cut, kinetic_energy)
        return np.log(k / self.low_energy_cut) / np.log(kinetic_energy / self.low_energy_cut)
