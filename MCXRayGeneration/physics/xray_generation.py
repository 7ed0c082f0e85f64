"""Bremsstrahlung X-ray generation driven by electron transport steps."""

import threading
from functools import partial
from typing import Dict, Optional, Sequence, Tuple
import numpy as np

from ..core.data_models import (
    Element,
    MaterialComposition,
    TransportEvent,
    EmissionRecord
)
from ..core.record_sink import EmissionRecordSink, EmissionListener
from ..utils.config import GenerationConfig
from ..utils.logging import get_logger
from ..utils.validation import validate_config, validate_transport_event
from .bremsstrahlung import KramersBremsstrahlung
from .bremsstrahlung_database import BremsstrahlungDatabase
from .cross_section_cache import ElementCrossSectionCache, ProviderFactory


logger = get_logger()


class BremsstrahlungXRayGeneration:
    """Turns electron transport steps into weighted Bremsstrahlung photons.

    For every scatter or non-scatter step the generator picks a uniformly
    distributed point along the step, computes the expected number of
    Bremsstrahlung photons produced by each element of the current material,
    credits the whole expectation to one element chosen in proportion to its
    share, and draws ``samples_per_step`` photon energies from that element.
    Each photon above the minimum energy carries weight
    ``sumProb / samples_per_step``; photons below it are dropped without
    redistributing their weight.

    Accepted photons of one step are published to listeners as a single
    batch. Any other transport notification is forwarded to listeners
    unchanged with no photons.

    Attributes:
        config: Generation configuration
        rng: Source of uniform draws in [0, 1) (numpy Generator or equivalent)
        cache: Per-element cross-section providers
        sink: Record sink holding the current step's photons
        min_photon_energy: Photons at or below this energy (eV) are dropped
        samples_per_step: Number of sub-samples drawn per step
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        rng=None,
        provider_factory: Optional[ProviderFactory] = None,
        sink: Optional[EmissionRecordSink] = None
    ):
        """Initialize BremsstrahlungXRayGeneration.

        Args:
            config: Generation configuration (defaults to GenerationConfig())
            rng: Uniform random source with a ``random()`` method; defaults to
                a numpy Generator seeded from ``config.random_seed``
            provider_factory: Builds a cross-section provider for an element;
                defaults to KramersBremsstrahlung with the configured cut
            sink: Record sink to publish through (a new one by default)
        """
        self.config = config if config is not None else GenerationConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.random_seed)

        if provider_factory is None:
            provider_factory = partial(
                KramersBremsstrahlung, low_energy_cut=self.config.low_energy_cut_eV
            )
        self.cache = ElementCrossSectionCache(provider_factory)
        self.sink = sink if sink is not None else EmissionRecordSink()

        self.min_photon_energy = self.config.min_photon_energy_eV
        self.samples_per_step = self.config.samples_per_step

        # Serialises reset/add/publish; re-entrant so listeners may drive new steps
        self._lock = threading.RLock()
        self.reset_statistics()

        logger.debug(
            f"BremsstrahlungXRayGeneration initialized: "
            f"samples_per_step={self.samples_per_step}, "
            f"min_photon_energy={self.min_photon_energy} eV"
        )

    @classmethod
    def create(
        cls,
        config: Optional[GenerationConfig] = None,
        rng=None,
        database: Optional[BremsstrahlungDatabase] = None
    ) -> 'BremsstrahlungXRayGeneration':
        """Build a generator from configuration.

        Tabulated providers are used when a database is passed or
        ``config.cross_section_database_path`` is set; otherwise the analytic
        Kramers model.

        Args:
            config: Generation configuration
            rng: Optional uniform random source
            database: Optional Bremsstrahlung table database

        Returns:
            Configured BremsstrahlungXRayGeneration
        """
        config = config if config is not None else GenerationConfig()
        validate_config(config)

        if database is None and config.cross_section_database_path:
            database = BremsstrahlungDatabase(config.cross_section_database_path)

        provider_factory = database.create_provider if database is not None else None
        if database is not None:
            logger.info(f"Using tabulated Bremsstrahlung data from {database.database_path}")
        else:
            logger.info("Using analytic Kramers Bremsstrahlung model")

        return cls(config=config, rng=rng, provider_factory=provider_factory)

    def add_listener(self, listener: EmissionListener) -> None:
        self.sink.add_listener(listener)

    def remove_listener(self, listener: EmissionListener) -> None:
        self.sink.remove_listener(listener)

    def __call__(self, event: TransportEvent) -> Tuple[EmissionRecord, ...]:
        return self.handle_event(event)

    def handle_event(self, event: TransportEvent) -> Tuple[EmissionRecord, ...]:
        """Process one transport notification.

        Args:
            event: Notification from the transport driver

        Returns:
            Photons accepted for this step (empty for non-step events)

        Raises:
            TransportContractError: If the notification is malformed
        """
        validate_transport_event(event)

        with self._lock:
            self.sink.reset()
            if not event.is_step:
                self.sink.forward(event.event_id)
                self._lifecycle_events_forwarded += 1
                return ()
            self._steps_processed += 1
            return self._generate(event)

    def _generate(self, event: TransportEvent) -> Tuple[EmissionRecord, ...]:
        step = event.step
        material = event.material

        elements = material.elements()
        if not elements:
            return ()

        # One draw places both the emission point and the electron energy
        frac = self.rng.random()
        position = step.point_at(frac)
        energy = step.energy_at(frac)

        probabilities = self.element_probabilities(
            material, energy, step.step_length, elements
        )
        sum_prob = float(np.sum(probabilities))
        if sum_prob <= 0.0:
            return ()
        self._total_probability += sum_prob

        element = self.select_element(elements, probabilities, sum_prob)
        provider = self.cache.get(element)

        weight = sum_prob / self.samples_per_step
        for _ in range(self.samples_per_step):
            photon_energy = provider.randomized_energy(energy, self.rng.random())
            if photon_energy > self.min_photon_energy:
                self.sink.add(EmissionRecord(
                    position=position,
                    energy=photon_energy,
                    weight=weight,
                    element=element,
                    direction=step.direction,
                    generating_energy=energy
                ))

        records = self.sink.records
        if records:
            self._steps_with_emission += 1
            self._photons_emitted += len(records)
            self._total_weight_emitted += weight * len(records)
            self.sink.publish(event.event_id, event.kind)
        return records

    def element_probabilities(
        self,
        material: MaterialComposition,
        energy: float,
        step_length: float,
        elements: Optional[Sequence[Element]] = None
    ) -> np.ndarray:
        """Expected number of Bremsstrahlung photons per element over a step.

        p = N * sigma(E) * stepLength; non-positive (or NaN) values are
        reported as zero.

        Args:
            material: Material of the current region
            energy: Electron kinetic energy in eV
            step_length: Step length in m
            elements: Elements to evaluate, in selection order
                (defaults to ``material.elements()``)

        Returns:
            Probabilities aligned with ``elements``
        """
        if elements is None:
            elements = material.elements()

        probabilities = np.zeros(len(elements), dtype=np.float64)
        for j, element in enumerate(elements):
            p = (
                material.atoms_per_cubic_meter(element)
                * self.cache.get(element).sigma(energy)
                * step_length
            )
            if p > 0:
                probabilities[j] = p
        return probabilities

    def select_element(
        self,
        elements: Sequence[Element],
        probabilities: Sequence[float],
        sum_prob: float
    ) -> Element:
        """Roulette-wheel selection of the element credited with the step.

        Elements with non-positive probability can never be selected.

        Args:
            elements: Candidate elements in stable order
            probabilities: Probability of each element
            sum_prob: Sum of the positive probabilities

        Returns:
            Selected element
        """
        r = self.rng.random() * sum_prob
        selected = None
        for element, p in zip(elements, probabilities):
            if p <= 0.0:
                continue
            selected = element
            r -= p
            if r <= 0.0:
                return element
        # Rounding can leave r marginally positive after the last element
        if selected is None:
            raise ValueError("select_element called with no positive probability")
        return selected

    def get_statistics(self) -> Dict[str, float]:
        """Counters accumulated since construction or the last reset."""
        return {
            'steps_processed': self._steps_processed,
            'steps_with_emission': self._steps_with_emission,
            'photons_emitted': self._photons_emitted,
            'total_probability': self._total_probability,
            'total_weight_emitted': self._total_weight_emitted,
            'lifecycle_events_forwarded': self._lifecycle_events_forwarded,
            'cached_providers': len(self.cache),
        }

    def reset_statistics(self) -> None:
        self._steps_processed = 0
        self._steps_with_emission = 0
        self._photons_emitted = 0
        self._total_probability = 0.0
        self._total_weight_emitted = 0.0
        self._lifecycle_events_forwarded = 0
