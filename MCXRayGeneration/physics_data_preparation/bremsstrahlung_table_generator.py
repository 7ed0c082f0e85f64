"""Bremsstrahlung table database generator."""

import h5py
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional
import logging

from ..core.data_models import Element
from ..physics.bremsstrahlung import KramersBremsstrahlung
from ..physics.bremsstrahlung_database import BREMSSTRAHLUNG_GROUP
from ..physics.constants import (
    DEFAULT_LOW_ENERGY_CUT_EV,
    DEFAULT_TABLE_MIN_ENERGY_EV,
    DEFAULT_TABLE_MAX_ENERGY_EV,
    DEFAULT_TABLE_ENERGY_POINTS,
    DEFAULT_TABLE_KAPPA_POINTS
)


logger = logging.getLogger(__name__)


class BremsstrahlungTableGenerator:
    """Generates per-element Bremsstrahlung tables in the database layout.

    Tables are computed from the analytic Kramers model; the resulting file
    is read back by BremsstrahlungDatabase.

    Attributes:
        low_energy_cut_eV: Photon energy cut of the underlying model
        elements: Dictionary of defined elements and their computed tables
    """

    def __init__(self, low_energy_cut_eV: float = DEFAULT_LOW_ENERGY_CUT_EV):
        """Initialize BremsstrahlungTableGenerator.

        Args:
            low_energy_cut_eV: Photon energy cut of the analytic model in eV
        """
        self.low_energy_cut_eV = low_energy_cut_eV
        self.elements: Dict[str, dict] = {}

        logger.info(f"BremsstrahlungTableGenerator initialized (k_cut={low_energy_cut_eV} eV)")

    def define_element(self, symbol: str) -> None:
        """Register an element for table calculation.

        Args:
            symbol: Chemical symbol (e.g., 'Cu')
        """
        element = Element.from_symbol(symbol)
        self.elements[symbol] = {'element': element}
        logger.info(f"Defined element: {symbol} (Z={element.atomic_number})")

    def calculate_tables(
        self,
        energy_grid: Optional[np.ndarray] = None,
        n_kappa: int = DEFAULT_TABLE_KAPPA_POINTS,
        min_kappa: float = 1e-8
    ) -> None:
        """Calculate cross sections and photon energy CDFs for all elements.

        Args:
            energy_grid: Electron kinetic energies in eV (log-spaced default)
            n_kappa: Number of reduced photon energy points
            min_kappa: Smallest tabulated reduced photon energy k/E
        """
        if energy_grid is None:
            energy_grid = np.logspace(
                np.log10(DEFAULT_TABLE_MIN_ENERGY_EV),
                np.log10(DEFAULT_TABLE_MAX_ENERGY_EV),
                DEFAULT_TABLE_ENERGY_POINTS
            )
        energy_grid = np.asarray(energy_grid, dtype=np.float64)
        kappa = np.logspace(np.log10(min_kappa), 0.0, n_kappa)

        logger.info(
            f"Calculating Bremsstrahlung tables for {len(self.elements)} elements "
            f"on {len(energy_grid)} energy points..."
        )

        for symbol, data in self.elements.items():
            model = KramersBremsstrahlung(data['element'], self.low_energy_cut_eV)
            data['energy_grid'] = energy_grid
            data['total_cross_section'] = np.array([model.sigma(e) for e in energy_grid])
            data['reduced_photon_energy'] = kappa
            data['cumulative_distribution'] = np.stack([
                model.cumulative_fraction(e, kappa * e) for e in energy_grid
            ])

        logger.info("Bremsstrahlung table calculation complete")

    def export_database(self, output_path: str) -> List[str]:
        """Export Bremsstrahlung tables to HDF5.

        Args:
            output_path: Path to output HDF5 file

        Returns:
            Symbols of the exported elements
        """
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        exported = []
        with h5py.File(output_file, 'w') as f:
            for symbol, data in self.elements.items():
                if 'total_cross_section' not in data:
                    logger.warning(f"No Bremsstrahlung table for {symbol}")
                    continue

                element_group = f.create_group(symbol)
                element_group.attrs['atomic_number'] = data['element'].atomic_number

                brems_group = element_group.create_group(BREMSSTRAHLUNG_GROUP)
                for name in (
                    'energy_grid',
                    'total_cross_section',
                    'reduced_photon_energy',
                    'cumulative_distribution'
                ):
                    brems_group.create_dataset(name, data=data[name])
                exported.append(symbol)

        logger.info(f"Exported Bremsstrahlung database: {output_path}")
        return exported
