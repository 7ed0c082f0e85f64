"""
Tests for MCXRayGeneration.physics.xray_generation module.
"""
import numpy as np
import pytest

from MCXRayGeneration.core import (
    Element,
    EventKind,
    LifecycleEvent,
    MaterialComposition,
    TransportEvent,
    TransportStep,
    PhotonBank,
    SCATTER_EVENT_ID,
    NON_SCATTER_EVENT_ID,
)
from MCXRayGeneration.physics import BremsstrahlungXRayGeneration, KramersBremsstrahlung
from MCXRayGeneration.utils import GenerationConfig, TransportContractError


@pytest.fixture
def carbon_copper(carbon, copper):
    return MaterialComposition('CarbonCopper', {carbon: 1.0, copper: 1.0})


def make_generator(rng, factory, samples_per_step=10, min_photon_energy_eV=100.0):
    config = GenerationConfig(
        samples_per_step=samples_per_step, min_photon_energy_eV=min_photon_energy_eV
    )
    generator = BremsstrahlungXRayGeneration(config=config, rng=rng, provider_factory=factory)
    received = []
    generator.add_listener(received.append)
    return generator, received


class TestEmissionSampling:
    def test_reference_step(self, scripted_random, make_factory, copper, nanometre_step):
        """N=1e29, sigma=1e-25, L=1e-9 gives ten photons of weight 1e-6."""
        material = MaterialComposition('Cu', {copper: 1.0e29})
        rng = scripted_random([0.5, 0.5] + [0.1] * 10)
        generator, received = make_generator(rng, make_factory(default_cross_section=1.0e-25))

        records = generator.handle_event(TransportEvent.scatter(nanometre_step, material))

        assert rng.consumed == 12
        assert len(records) == 10
        for record in records:
            assert record.weight == pytest.approx(1.0e-6)
            assert record.element == copper
            assert record.energy == 1000.0
        assert len(received) == 1
        assert received[0].records == records
        assert received[0].total_weight == pytest.approx(1.0e-5)

    def test_position_and_energy_share_fraction(self, scripted_random, make_factory, copper,
                                                nanometre_step):
        material = MaterialComposition('Cu', {copper: 1.0})
        rng = scripted_random([0.25, 0.0] + [0.5] * 10)
        generator, _ = make_generator(rng, make_factory())

        records = generator.handle_event(TransportEvent.scatter(nanometre_step, material))

        for record in records:
            np.testing.assert_allclose(record.position, [0.0, 0.0, 0.25e-9])
            assert record.generating_energy == pytest.approx(10.1e3)
            np.testing.assert_array_equal(record.direction, [0.0, 0.0, 1.0])

    def test_threshold_is_exclusive(self, scripted_random, make_factory, copper, nanometre_step):
        """100.0 eV is dropped, 100.01 eV is kept; dropped weight is not redistributed."""
        material = MaterialComposition('Cu', {copper: 1.0e29})
        rng = scripted_random([0.5, 0.5] + [0.1] * 10)
        factory = make_factory(default_cross_section=1.0e-25, photon_energies=(100.0, 100.01))
        generator, received = make_generator(rng, factory)

        records = generator.handle_event(TransportEvent.scatter(nanometre_step, material))

        assert len(records) == 5
        assert all(r.energy == 100.01 for r in records)
        assert all(r.weight == pytest.approx(1.0e-6) for r in records)
        assert received[0].total_weight == pytest.approx(5.0e-6)

    def test_all_rejected_publishes_nothing(self, scripted_random, make_factory, copper,
                                            nanometre_step):
        material = MaterialComposition('Cu', {copper: 1.0})
        rng = scripted_random([0.5, 0.5] + [0.1] * 10)
        generator, received = make_generator(rng, make_factory(photon_energies=(50.0,)))

        assert generator.handle_event(TransportEvent.scatter(nanometre_step, material)) == ()
        assert received == []

    def test_weight_conserved_when_all_accepted(self, rng, make_factory, carbon_copper,
                                                nanometre_step):
        factory = make_factory(cross_sections={'C': 2.0e-25, 'Cu': 3.0e-25})
        generator, received = make_generator(rng, factory, samples_per_step=7)
        material = MaterialComposition(
            'Mix', {e: 5.0e28 for e in carbon_copper.elements()}
        )

        generator.handle_event(TransportEvent.non_scatter(nanometre_step, material))

        expected = 5.0e28 * (2.0e-25 + 3.0e-25) * nanometre_step.step_length
        assert len(received[0]) == 7
        assert received[0].total_weight == pytest.approx(expected)

    def test_one_element_per_step(self, rng, make_factory, carbon_copper, nanometre_step):
        generator, received = make_generator(rng, make_factory())
        for _ in range(50):
            generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))
        for event in received:
            assert len({r.element for r in event.records}) == 1

    def test_selection_frequency(self, rng, make_factory, carbon, carbon_copper, nanometre_step):
        """A 3:1 weight ratio selects the heavier share 75% of the time."""
        factory = make_factory(cross_sections={'C': 3.0, 'Cu': 1.0})
        generator, received = make_generator(rng, factory, samples_per_step=1)

        n_steps = 10000
        for _ in range(n_steps):
            generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))

        carbon_steps = sum(1 for event in received if event.records[0].element == carbon)
        assert len(received) == n_steps
        assert carbon_steps / n_steps == pytest.approx(0.75, abs=0.02)

    @pytest.mark.parametrize("u", [0.0, 0.3, 0.999999])
    def test_zero_weight_element_never_selected(self, scripted_random, make_factory, carbon,
                                                copper, carbon_copper, nanometre_step, u):
        rng = scripted_random([0.5, u] + [0.5] * 10)
        factory = make_factory(cross_sections={'C': 0.0, 'Cu': 5.0})
        generator, _ = make_generator(rng, factory)

        records = generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))

        assert records
        assert all(r.element == copper for r in records)


class TestDegenerateSteps:
    def test_empty_material_consumes_no_draws(self, scripted_random, make_factory,
                                              nanometre_step):
        rng = scripted_random([])
        factory = make_factory()
        generator, received = make_generator(rng, factory)

        records = generator.handle_event(
            TransportEvent.scatter(nanometre_step, MaterialComposition.vacuum())
        )

        assert records == ()
        assert received == []
        assert rng.consumed == 0
        assert factory.constructed == []

    def test_zero_cross_sections(self, scripted_random, make_factory, carbon_copper,
                                 nanometre_step):
        rng = scripted_random([0.5])
        generator, received = make_generator(rng, make_factory(default_cross_section=0.0))

        assert generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper)) == ()
        assert received == []
        assert rng.consumed == 1

    def test_negative_density_excluded(self, scripted_random, make_factory, carbon, copper,
                                       nanometre_step):
        material = MaterialComposition('Odd', {carbon: -1.0e28, copper: 1.0e28})
        rng = scripted_random([0.5, 0.0] + [0.5] * 10)
        generator, _ = make_generator(rng, make_factory(default_cross_section=1.0e-25))

        records = generator.handle_event(TransportEvent.scatter(nanometre_step, material))

        assert all(r.element == copper for r in records)
        expected = 1.0e28 * 1.0e-25 * nanometre_step.step_length / 10
        assert records[0].weight == pytest.approx(expected)

    def test_zero_length_step(self, scripted_random, make_factory, carbon_copper):
        step = TransportStep([0, 0, 1e-9], [0, 0, 1e-9], 1e4, 1e4, [0, 0, 1])
        rng = scripted_random([0.5])
        generator, received = make_generator(rng, make_factory())

        assert generator.handle_event(TransportEvent.scatter(step, carbon_copper)) == ()
        assert received == []


class TestLifecycleForwarding:
    @pytest.mark.parametrize("event_id", list(LifecycleEvent))
    def test_forwarded_unchanged(self, scripted_random, make_factory, event_id):
        rng = scripted_random([])
        factory = make_factory()
        generator, received = make_generator(rng, factory)

        assert generator.handle_event(TransportEvent.lifecycle(event_id)) == ()

        assert len(received) == 1
        assert received[0].event_id == event_id
        assert received[0].kind is EventKind.OTHER
        assert received[0].records == ()
        assert rng.consumed == 0
        assert factory.constructed == []
        assert len(generator.cache) == 0

    def test_previous_batch_not_replayed(self, rng, make_factory, carbon_copper, nanometre_step):
        generator, received = make_generator(rng, make_factory())
        generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))
        generator.handle_event(TransportEvent.lifecycle(LifecycleEvent.TRAJECTORY_END))

        assert len(received[0]) == 10
        assert received[1].records == ()


class TestGeneratorInterface:
    def test_step_event_identifiers(self, rng, make_factory, carbon_copper, nanometre_step):
        generator, received = make_generator(rng, make_factory())
        generator(TransportEvent.scatter(nanometre_step, carbon_copper))
        generator(TransportEvent.non_scatter(nanometre_step, carbon_copper))

        assert [e.event_id for e in received] == [SCATTER_EVENT_ID, NON_SCATTER_EVENT_ID]
        assert [e.kind for e in received] == [EventKind.SCATTER, EventKind.NON_SCATTER]

    def test_one_publication_per_step(self, rng, make_factory, carbon_copper, nanometre_step):
        generator, received = make_generator(rng, make_factory())
        for _ in range(5):
            generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))
        assert len(received) == 5
        assert all(len(event) == 10 for event in received)

    def test_providers_built_once(self, rng, make_factory, carbon_copper, nanometre_step):
        factory = make_factory()
        generator, _ = make_generator(rng, factory)
        for _ in range(20):
            generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))
        assert sorted(factory.constructed) == carbon_copper.elements()

    def test_malformed_event_rejected(self, rng, make_factory, carbon_copper):
        generator, received = make_generator(rng, make_factory())
        with pytest.raises(TransportContractError):
            generator.handle_event(TransportEvent(EventKind.SCATTER, SCATTER_EVENT_ID))
        with pytest.raises(TransportContractError):
            generator.handle_event('scatter')
        assert received == []

    def test_removed_listener_not_notified(self, rng, make_factory):
        generator, received = make_generator(rng, make_factory())
        generator.remove_listener(received.append)
        generator.handle_event(TransportEvent.lifecycle(LifecycleEvent.RUN_START))
        assert received == []

    def test_photon_bank_listener(self, rng, make_factory, carbon_copper, nanometre_step):
        generator, _ = make_generator(rng, make_factory())
        bank = PhotonBank.create_empty(100)
        generator.add_listener(bank)
        generator.handle_event(TransportEvent.lifecycle(LifecycleEvent.RUN_START))
        for _ in range(3):
            generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))
        assert bank.count == 30

    def test_statistics(self, rng, make_factory, carbon_copper, nanometre_step):
        generator, _ = make_generator(rng, make_factory())
        generator.handle_event(TransportEvent.lifecycle(LifecycleEvent.RUN_START))
        for _ in range(4):
            generator.handle_event(TransportEvent.scatter(nanometre_step, carbon_copper))

        stats = generator.get_statistics()
        assert stats['steps_processed'] == 4
        assert stats['steps_with_emission'] == 4
        assert stats['photons_emitted'] == 40
        assert stats['lifecycle_events_forwarded'] == 1
        assert stats['cached_providers'] == 2
        assert stats['total_weight_emitted'] == pytest.approx(stats['total_probability'])

        generator.reset_statistics()
        assert generator.get_statistics()['steps_processed'] == 0


class TestSelectElement:
    def test_roulette_boundaries(self, scripted_random, make_factory, carbon, copper):
        rng = scripted_random([0.0, 0.25, 0.2500001, 0.999])
        generator, _ = make_generator(rng, make_factory())
        elements = [carbon, copper]
        probabilities = [1.0, 3.0]

        picks = [generator.select_element(elements, probabilities, 4.0) for _ in range(4)]

        assert picks == [carbon, carbon, copper, copper]

    def test_no_positive_probability(self, scripted_random, make_factory, carbon):
        generator, _ = make_generator(scripted_random([0.5]), make_factory())
        with pytest.raises(ValueError):
            generator.select_element([carbon], [0.0], 0.0)

    def test_element_probabilities(self, make_factory, rng, carbon, copper, nanometre_step):
        factory = make_factory(cross_sections={'C': 2.0, 'Cu': 0.0})
        generator, _ = make_generator(rng, factory)
        material = MaterialComposition('Mix', {carbon: 3.0, copper: 4.0})

        probabilities = generator.element_probabilities(material, 1.0e4, 0.5)

        np.testing.assert_allclose(probabilities, [3.0, 0.0])


class TestKramersGeneration:
    def test_default_model_on_copper(self, config, copper, copper_material, nanometre_step):
        generator = BremsstrahlungXRayGeneration.create(config)
        received = []
        generator.add_listener(received.append)

        for _ in range(200):
            generator.handle_event(TransportEvent.scatter(nanometre_step, copper_material))

        assert isinstance(generator.cache.get(copper), KramersBremsstrahlung)
        records = [r for event in received for r in event.records]
        assert records
        for record in records:
            assert 100.0 < record.energy <= record.generating_energy
            assert record.element == copper

        n = copper_material.atoms_per_cubic_meter(copper)
        sigma_max = KramersBremsstrahlung(copper).sigma(10.2e3)
        assert max(r.weight for r in records) <= n * sigma_max * 1e-9 / 10 * (1 + 1e-9)

    def test_seed_reproducibility(self, copper_material, nanometre_step):
        def run():
            generator = BremsstrahlungXRayGeneration.create(GenerationConfig(random_seed=11))
            energies = []
            for _ in range(20):
                records = generator.handle_event(
                    TransportEvent.scatter(nanometre_step, copper_material)
                )
                energies.extend(r.energy for r in records)
            return energies

        assert run() == run()

    def test_heavy_element_dominates_selection(self, rng, nanometre_step):
        """Z(Z+1) scaling makes lead win nearly every step in an equal mixture."""
        lead = Element.from_symbol('Pb')
        hydrogen = Element.from_symbol('H')
        material = MaterialComposition('Mix', {hydrogen: 1.0e28, lead: 1.0e28})
        generator = BremsstrahlungXRayGeneration(GenerationConfig(samples_per_step=1), rng=rng)
        received = []
        generator.add_listener(received.append)

        for _ in range(2000):
            generator.handle_event(TransportEvent.scatter(nanometre_step, material))

        steps = [event.records[0].element for event in received]
        assert steps.count(lead) / len(steps) > 0.99
