"""
Shared pytest fixtures for MCXRayGeneration test suite.
"""
import numpy as np
import pytest

from MCXRayGeneration.core import Element, MaterialComposition, TransportStep
from MCXRayGeneration.physics import CrossSectionProvider
from MCXRayGeneration.utils import GenerationConfig


class ScriptedRandom:
    """Uniform source returning a fixed sequence of draws."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.consumed = 0

    def random(self):
        if self.consumed >= len(self.draws):
            raise AssertionError("ScriptedRandom exhausted")
        value = self.draws[self.consumed]
        self.consumed += 1
        return value


class StubProvider(CrossSectionProvider):
    """Provider with a constant cross section and a cycle of photon energies."""

    def __init__(self, element, cross_section=1.0, photon_energies=(1000.0,)):
        super().__init__(element)
        self.cross_section = cross_section
        self.photon_energies = list(photon_energies)
        self.sigma_calls = 0
        self.energy_calls = 0

    def sigma(self, energy):
        self.sigma_calls += 1
        return self.cross_section

    def randomized_energy(self, kinetic_energy, uniform_draw):
        value = self.photon_energies[self.energy_calls % len(self.photon_energies)]
        self.energy_calls += 1
        return value


class CountingFactory:
    """Provider factory recording every construction."""

    def __init__(self, cross_sections=None, photon_energies=(1000.0,), default_cross_section=1.0):
        self.cross_sections = dict(cross_sections or {})
        self.photon_energies = photon_energies
        self.default_cross_section = default_cross_section
        self.constructed = []

    def __call__(self, element):
        self.constructed.append(element)
        return StubProvider(
            element,
            self.cross_sections.get(element.symbol, self.default_cross_section),
            self.photon_energies
        )


@pytest.fixture
def rng():
    """Numpy Generator with fixed seed for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom


@pytest.fixture
def make_factory():
    """Factory for CountingFactory provider factories."""
    return CountingFactory


@pytest.fixture
def copper():
    return Element.from_symbol('Cu')


@pytest.fixture
def carbon():
    return Element.from_symbol('C')


@pytest.fixture
def copper_material():
    """Pure copper at 8.96 g/cm³."""
    return MaterialComposition.from_mass_fractions('Copper', 8.96, {'Cu': 1.0})


@pytest.fixture
def water():
    return MaterialComposition.from_mass_fractions('Water', 1.0, {'H': 0.111, 'O': 0.889})


@pytest.fixture
def nanometre_step():
    """1 nm step along +z, slowing from 10.2 keV to 9.8 keV."""
    return TransportStep(
        prev_position=[0.0, 0.0, 0.0],
        position=[0.0, 0.0, 1.0e-9],
        prev_energy=10.2e3,
        energy=9.8e3,
        direction=[0.0, 0.0, 1.0]
    )


@pytest.fixture
def config():
    """Reference configuration with a fixed seed."""
    return GenerationConfig.get_default_config()
