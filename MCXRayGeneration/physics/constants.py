"""Physical constants for Bremsstrahlung X-ray generation (SI units, energies in eV)."""

# Fundamental constants
AVOGADRO = 6.02214076e23  # Avogadro constant in 1/mol
FINE_STRUCTURE_CONSTANT = 7.2973525693e-3  # Dimensionless
CLASSICAL_ELECTRON_RADIUS = 2.8179403262e-15  # r_e in m

# Kramers thin-target prefactor: 16/3 * alpha * r_e^2 (m^2)
KRAMERS_CROSS_SECTION_CONSTANT = (
    16.0 / 3.0 * FINE_STRUCTURE_CONSTANT * CLASSICAL_ELECTRON_RADIUS ** 2
)

# Conversion factors
G_CM3_TO_KG_M3 = 1000.0
GRAMS_TO_KG = 1.0e-3

# Sampling defaults
DEFAULT_LOW_ENERGY_CUT_EV = 1.0  # Photon energy cut of the analytic model

# Table generation defaults
DEFAULT_TABLE_MIN_ENERGY_EV = 100.0
DEFAULT_TABLE_MAX_ENERGY_EV = 1.0e7
DEFAULT_TABLE_ENERGY_POINTS = 200
DEFAULT_TABLE_KAPPA_POINTS = 128
