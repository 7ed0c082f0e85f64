"""Periodic table data used to build Element identities and materials."""

from typing import Dict, Tuple


# symbol -> (atomic number, standard atomic weight in g/mol)
PERIODIC_TABLE: Dict[str, Tuple[int, float]] = {
    'H': (1, 1.008),
    'He': (2, 4.0026),
    'Li': (3, 6.94),
    'Be': (4, 9.0122),
    'B': (5, 10.81),
    'C': (6, 12.011),
    'N': (7, 14.007),
    'O': (8, 15.999),
    'F': (9, 18.998),
    'Ne': (10, 20.180),
    'Na': (11, 22.990),
    'Mg': (12, 24.305),
    'Al': (13, 26.982),
    'Si': (14, 28.085),
    'P': (15, 30.974),
    'S': (16, 32.06),
    'Cl': (17, 35.45),
    'Ar': (18, 39.948),
    'K': (19, 39.098),
    'Ca': (20, 40.078),
    'Sc': (21, 44.956),
    'Ti': (22, 47.867),
    'V': (23, 50.942),
    'Cr': (24, 51.996),
    'Mn': (25, 54.938),
    'Fe': (26, 55.845),
    'Co': (27, 58.933),
    'Ni': (28, 58.693),
    'Cu': (29, 63.546),
    'Zn': (30, 65.38),
    'Mo': (42, 95.95),
    'Ag': (47, 107.87),
    'Sn': (50, 118.71),
    'I': (53, 126.90),
    'W': (74, 183.84),
    'Pt': (78, 195.08),
    'Au': (79, 196.97),
    'Pb': (82, 207.2),
    'U': (92, 238.03),
}

SYMBOLS_BY_ATOMIC_NUMBER: Dict[int, str] = {
    z: symbol for symbol, (z, _) in PERIODIC_TABLE.items()
}


def atomic_number(symbol: str) -> int:
    """Atomic number for an element symbol.

    Raises:
        KeyError: If the symbol is not tabulated
    """
    if symbol not in PERIODIC_TABLE:
        raise KeyError(f"Unknown element symbol: {symbol}")
    return PERIODIC_TABLE[symbol][0]


def atomic_weight(symbol: str) -> float:
    """Standard atomic weight in g/mol for an element symbol."""
    if symbol not in PERIODIC_TABLE:
        raise KeyError(f"Unknown element symbol: {symbol}")
    return PERIODIC_TABLE[symbol][1]


def symbol_for(z: int) -> str:
    """Element symbol for an atomic number."""
    if z not in SYMBOLS_BY_ATOMIC_NUMBER:
        raise KeyError(f"No tabulated element with atomic number {z}")
    return SYMBOLS_BY_ATOMIC_NUMBER[z]
