"""
Basic usage example for Bremsstrahlung X-ray generation.

This example demonstrates how to:
1. Configure the generator and attach listeners
2. Feed it the steps of a (straight, idealised) electron track
3. Collect the weighted photons in a tensor bank
"""

import numpy as np

from MCXRayGeneration import (
    BremsstrahlungXRayGeneration,
    GenerationConfig,
    MaterialComposition,
    PhotonBank,
    TransportEvent,
    TransportStep
)
from MCXRayGeneration.core import EmissionEvent, LifecycleEvent
from MCXRayGeneration.utils import setup_logger, validate_material


def straight_track(initial_energy: float, n_steps: int, step_length: float):
    """Yield steps of an electron slowing down uniformly along +z.

    Args:
        initial_energy: Kinetic energy at the track start in eV
        n_steps: Number of steps until the electron stops
        step_length: Step length in m
    """
    direction = np.array([0.0, 0.0, 1.0])
    energy_loss = initial_energy / n_steps
    position = np.zeros(3)
    energy = initial_energy
    for _ in range(n_steps):
        new_position = position + step_length * direction
        new_energy = energy - energy_loss
        yield TransportStep(position, new_position, energy, new_energy, direction)
        position, energy = new_position, new_energy


def main():
    logger = setup_logger(level=20)

    config = GenerationConfig(samples_per_step=10, min_photon_energy_eV=100.0, random_seed=1)
    generator = BremsstrahlungXRayGeneration.create(config)

    copper = MaterialComposition.from_mass_fractions('Copper', 8.96, {'Cu': 1.0})
    validate_material(copper)

    bank = PhotonBank.create_empty(config.photon_bank_capacity, device=config.device)
    generator.add_listener(bank)

    def report_lifecycle(event: EmissionEvent) -> None:
        if event.is_lifecycle:
            logger.info(f"Lifecycle event {event.event_id} forwarded")

    generator.add_listener(report_lifecycle)

    generator.handle_event(TransportEvent.lifecycle(LifecycleEvent.RUN_START))
    for step in straight_track(initial_energy=20.0e3, n_steps=200, step_length=1.0e-8):
        generator.handle_event(TransportEvent.scatter(step, copper))
    generator.handle_event(TransportEvent.lifecycle(LifecycleEvent.RUN_END))

    stats = generator.get_statistics()
    photons = bank.get_active()
    logger.info(f"Steps processed: {stats['steps_processed']}")
    logger.info(f"Photons emitted: {stats['photons_emitted']}")
    logger.info(f"Expected photons per electron: {stats['total_probability']:.4e}")
    logger.info(f"Weight carried by accepted photons: {bank.total_weight():.4e}")
    if photons.count > 0:
        logger.info(
            f"Photon energy range: {photons.energies.min().item():.1f} - "
            f"{photons.energies.max().item():.1f} eV"
        )


if __name__ == '__main__':
    main()
