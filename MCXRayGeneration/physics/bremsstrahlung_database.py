"""Tabulated Bremsstrahlung data loaded from an HDF5 database."""

import h5py
from pathlib import Path
from typing import Dict, List
import numpy as np

from ..core.data_models import Element
from ..utils.logging import get_logger
from .bremsstrahlung import CrossSectionProvider


logger = get_logger()

BREMSSTRAHLUNG_GROUP = 'bremsstrahlung'


class TabulatedBremsstrahlung(CrossSectionProvider):
    """Cross-section provider backed by tabulated data.

    The total cross section is interpolated log-log on the energy grid.
    Photon energies are sampled by inverting the tabulated CDF of the reduced
    photon energy k/E, blending the two CDF rows that bracket the electron
    energy linearly in log E.

    Attributes:
        element: Element this provider describes
        energy_grid: Electron kinetic energies in eV [N]
        total_cross_section: Total cross section in m² [N]
        reduced_photon_energy: Reduced photon energy grid k/E in (0, 1] [M]
        cumulative_distribution: CDF of k/E for each grid energy [N, M]
    """

    def __init__(
        self,
        element: Element,
        energy_grid: np.ndarray,
        total_cross_section: np.ndarray,
        reduced_photon_energy: np.ndarray,
        cumulative_distribution: np.ndarray
    ):
        super().__init__(element)
        self.energy_grid = np.asarray(energy_grid, dtype=np.float64)
        self.total_cross_section = np.asarray(total_cross_section, dtype=np.float64)
        self.reduced_photon_energy = np.asarray(reduced_photon_energy, dtype=np.float64)
        self.cumulative_distribution = np.asarray(cumulative_distribution, dtype=np.float64)

        n_energy = len(self.energy_grid)
        n_kappa = len(self.reduced_photon_energy)
        if n_energy < 2:
            raise ValueError(f"{element.symbol}: energy grid needs at least 2 points")
        if self.total_cross_section.shape != (n_energy,):
            raise ValueError(
                f"{element.symbol}: cross section shape {self.total_cross_section.shape} "
                f"does not match energy grid ({n_energy},)"
            )
        if self.cumulative_distribution.shape != (n_energy, n_kappa):
            raise ValueError(
                f"{element.symbol}: CDF shape {self.cumulative_distribution.shape} "
                f"does not match ({n_energy}, {n_kappa})"
            )
        if np.any(np.diff(self.energy_grid) <= 0):
            raise ValueError(f"{element.symbol}: energy grid must be strictly ascending")

        self._log_energy_grid = np.log(self.energy_grid)
        # Zero entries map to the smallest positive double instead of -inf
        self._log_cross_section = np.log(
            np.maximum(self.total_cross_section, np.finfo(np.float64).tiny)
        )
        self._log_kappa = np.log(self.reduced_photon_energy)

    def sigma(self, energy: float) -> float:
        if energy <= 0 or energy < self.energy_grid[0]:
            return 0.0
        log_sigma = np.interp(np.log(energy), self._log_energy_grid, self._log_cross_section)
        return float(np.exp(log_sigma))

    def randomized_energy(self, kinetic_energy: float, uniform_draw: float) -> float:
        if kinetic_energy <= 0:
            return 0.0

        log_energy = np.log(kinetic_energy)
        index = int(np.searchsorted(self._log_energy_grid, log_energy))
        index = min(max(index, 1), len(self.energy_grid) - 1)

        lo, hi = self._log_energy_grid[index - 1], self._log_energy_grid[index]
        w = min(max((log_energy - lo) / (hi - lo), 0.0), 1.0)

        log_kappa_lo = np.interp(uniform_draw, self.cumulative_distribution[index - 1], self._log_kappa)
        log_kappa_hi = np.interp(uniform_draw, self.cumulative_distribution[index], self._log_kappa)
        kappa = np.exp((1.0 - w) * log_kappa_lo + w * log_kappa_hi)

        return float(kappa * kinetic_energy)


class BremsstrahlungDatabase:
    """Index of per-element Bremsstrahlung tables in an HDF5 file.

    Layout::

        /<symbol>                          attrs: atomic_number
        /<symbol>/bremsstrahlung/energy_grid
        /<symbol>/bremsstrahlung/total_cross_section
        /<symbol>/bremsstrahlung/reduced_photon_energy
        /<symbol>/bremsstrahlung/cumulative_distribution

    Providers are read from disk on every ``create_provider`` call; callers
    keep them in an ElementCrossSectionCache.

    Attributes:
        database_path: Path to HDF5 database
        elements: Atomic number of each tabulated element, keyed by symbol
    """

    def __init__(self, database_path: str):
        """Initialize BremsstrahlungDatabase.

        Args:
            database_path: Path to HDF5 Bremsstrahlung database
        """
        self.database_path = Path(database_path)
        self.elements: Dict[str, int] = {}

        if self.database_path.exists():
            self.load_database()
        else:
            logger.warning(f"Bremsstrahlung database not found: {database_path}")

    def load_database(self) -> None:
        """Index the elements present in the HDF5 file."""
        logger.info(f"Loading Bremsstrahlung database from {self.database_path}")

        try:
            with h5py.File(self.database_path, 'r') as f:
                for symbol in f.keys():
                    if f'{symbol}/{BREMSSTRAHLUNG_GROUP}' not in f:
                        logger.warning(f"Element {symbol} has no Bremsstrahlung table, skipped")
                        continue
                    self.elements[symbol] = int(f[symbol].attrs['atomic_number'])
        except Exception as e:
            raise RuntimeError(f"Failed to load Bremsstrahlung database: {e}")

        logger.info(f"Found {len(self.elements)} elements in database")

    def has_element(self, element: Element) -> bool:
        return self.elements.get(element.symbol) == element.atomic_number

    def list_elements(self) -> List[Element]:
        """Tabulated elements in ascending atomic number order."""
        return sorted(Element(z, symbol) for symbol, z in self.elements.items())

    def create_provider(self, element: Element) -> TabulatedBremsstrahlung:
        """Read the tables of one element.

        Args:
            element: Element to load

        Returns:
            TabulatedBremsstrahlung provider

        Raises:
            KeyError: If the element is not tabulated
        """
        if not self.has_element(element):
            raise KeyError(
                f"No Bremsstrahlung table for {element.symbol} in {self.database_path}"
            )

        with h5py.File(self.database_path, 'r') as f:
            group = f[f'{element.symbol}/{BREMSSTRAHLUNG_GROUP}']
            provider = TabulatedBremsstrahlung(
                element,
                energy_grid=np.array(group['energy_grid']),
                total_cross_section=np.array(group['total_cross_section']),
                reduced_photon_energy=np.array(group['reduced_photon_energy']),
                cumulative_distribution=np.array(group['cumulative_distribution'])
            )

        logger.debug(
            f"Loaded Bremsstrahlung table for {element.symbol}: "
            f"{len(provider.energy_grid)} energy points"
        )
        return provider
