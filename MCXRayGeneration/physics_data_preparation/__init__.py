"""Data preparation tools for Bremsstrahlung table databases."""

from .bremsstrahlung_table_generator import BremsstrahlungTableGenerator

__all__ = ['BremsstrahlungTableGenerator']
