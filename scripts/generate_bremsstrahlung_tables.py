"""Generate a Bremsstrahlung table database from the analytic Kramers model."""

import sys

import numpy as np

from MCXRayGeneration.physics import BremsstrahlungDatabase
from MCXRayGeneration.physics_data import get_bremsstrahlung_data_dir
from MCXRayGeneration.physics_data_preparation import BremsstrahlungTableGenerator


DEFAULT_OUTPUT_PATH = str(get_bremsstrahlung_data_dir() / 'kramers.h5')

# Elements of common targets, detectors and tissue
ELEMENTS = [
    'H', 'C', 'N', 'O', 'Na', 'Mg', 'Al', 'Si', 'P', 'S', 'Cl', 'K', 'Ca',
    'Ti', 'Fe', 'Ni', 'Cu', 'Zn', 'Mo', 'Ag', 'W', 'Au', 'Pb'
]


def generate_database(output_path: str) -> str:
    """Generate the Bremsstrahlung database."""
    print("Generating Bremsstrahlung table database...")

    generator = BremsstrahlungTableGenerator(low_energy_cut_eV=1.0)
    for symbol in ELEMENTS:
        generator.define_element(symbol)

    # Electron kinetic energies 100 eV to 10 MeV
    energy_grid = np.logspace(2, 7, 200)
    generator.calculate_tables(energy_grid, n_kappa=128)

    exported = generator.export_database(output_path)
    print(f"✓ Exported {len(exported)} elements to {output_path}")
    return output_path


def check_database(output_path: str) -> None:
    """Reload the database and print a few cross sections."""
    database = BremsstrahlungDatabase(output_path)
    for element in database.list_elements()[:5]:
        provider = database.create_provider(element)
        print(f"  {element.symbol:>2}: sigma(10 keV) = {provider.sigma(1.0e4):.3e} m²")


def main():
    """Generate and check the database."""
    print("=" * 60)
    print("Bremsstrahlung Table Generation")
    print("=" * 60)

    output_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_OUTPUT_PATH
    generate_database(output_path)
    check_database(output_path)


if __name__ == '__main__':
    main()
