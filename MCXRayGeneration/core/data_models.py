"""Core data models for Bremsstrahlung X-ray generation."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import torch
import numpy as np

from .elements import atomic_number, atomic_weight, symbol_for


@dataclass(frozen=True, order=True)
class Element:
    """Chemical element identity, ordered and hashed by atomic number.

    Attributes:
        atomic_number: Atomic number Z
        symbol: Chemical symbol (e.g., 'Cu')
    """
    atomic_number: int
    symbol: str = field(compare=False)

    @classmethod
    def from_symbol(cls, symbol: str) -> 'Element':
        return cls(atomic_number(symbol), symbol)

    @classmethod
    def from_atomic_number(cls, z: int) -> 'Element':
        return cls(z, symbol_for(z))

    @property
    def atomic_weight(self) -> float:
        """Standard atomic weight in g/mol."""
        return atomic_weight(self.symbol)

    def __str__(self) -> str:
        return self.symbol


@dataclass
class MaterialComposition:
    """Elemental composition of the region an electron is travelling through.

    Attributes:
        name: Material name
        number_densities: Atoms per cubic metre for each constituent element
    """
    name: str
    number_densities: Dict[Element, float] = field(default_factory=dict)

    def __post_init__(self):
        self.number_densities = dict(self.number_densities)

    @classmethod
    def from_mass_fractions(
        cls,
        name: str,
        density_g_cm3: float,
        composition: Mapping[str, float]
    ) -> 'MaterialComposition':
        """Build a composition from mass fractions.

        N_i = rho * w_i * N_A / A_i

        Args:
            name: Material name
            density_g_cm3: Mass density in g/cm³
            composition: Elemental composition {symbol: mass_fraction}

        Returns:
            MaterialComposition with number densities in atoms/m³
        """
        from ..physics.constants import AVOGADRO, G_CM3_TO_KG_M3, GRAMS_TO_KG

        rho = density_g_cm3 * G_CM3_TO_KG_M3
        densities = {}
        for symbol, mass_fraction in composition.items():
            element = Element.from_symbol(symbol)
            molar_mass = element.atomic_weight * GRAMS_TO_KG
            densities[element] = rho * mass_fraction * AVOGADRO / molar_mass
        return cls(name=name, number_densities=densities)

    @classmethod
    def vacuum(cls) -> 'MaterialComposition':
        return cls(name='Vacuum')

    def elements(self) -> List[Element]:
        """Constituent elements in ascending atomic number order."""
        return sorted(self.number_densities)

    def atoms_per_cubic_meter(self, element: Element) -> float:
        return self.number_densities.get(element, 0.0)

    @property
    def element_count(self) -> int:
        return len(self.number_densities)

    def __len__(self) -> int:
        return len(self.number_densities)

    def __contains__(self, element: object) -> bool:
        return element in self.number_densities


@dataclass(frozen=True, eq=False)
class TransportStep:
    """Immutable snapshot of one electron transport step.

    Attributes:
        prev_position: Position at the start of the step in m [3]
        position: Position at the end of the step in m [3]
        prev_energy: Kinetic energy at the start of the step in eV
        energy: Kinetic energy at the end of the step in eV
        direction: Unit travel direction [3]
        step_length: Distance between the two positions in m (derived)
    """
    prev_position: np.ndarray
    position: np.ndarray
    prev_energy: float
    energy: float
    direction: np.ndarray
    step_length: float = field(init=False)

    def __post_init__(self):
        # Copies so that the driver advancing its own arrays cannot alter the snapshot
        for name in ('prev_position', 'position', 'direction'):
            vector = np.array(getattr(self, name), dtype=np.float64)
            if vector.shape != (3,):
                raise ValueError(f"{name} must be a 3-vector, got shape {vector.shape}")
            vector.setflags(write=False)
            object.__setattr__(self, name, vector)
        object.__setattr__(self, 'prev_energy', float(self.prev_energy))
        object.__setattr__(self, 'energy', float(self.energy))
        object.__setattr__(
            self, 'step_length', float(np.linalg.norm(self.position - self.prev_position))
        )

    def point_at(self, frac: float) -> np.ndarray:
        """Position at fraction ``frac`` of the way along the step."""
        point = self.prev_position + frac * (self.position - self.prev_position)
        point.setflags(write=False)
        return point

    def energy_at(self, frac: float) -> float:
        """Kinetic energy at fraction ``frac`` of the way along the step."""
        return self.prev_energy + frac * (self.energy - self.prev_energy)


class EventKind(Enum):
    """Kind of notification delivered by the transport driver."""
    SCATTER = 'scatter'
    NON_SCATTER = 'non_scatter'
    OTHER = 'other'


SCATTER_EVENT_ID = 1
NON_SCATTER_EVENT_ID = 2


class LifecycleEvent(IntEnum):
    """Well-known identifiers of non-step transport notifications."""
    BACKSCATTER = 3
    EXIT_MATERIAL = 4
    TRAJECTORY_START = 5
    TRAJECTORY_END = 6
    RUN_END = 7
    RUN_START = 8


@dataclass(frozen=True, eq=False)
class TransportEvent:
    """Notification from the transport driver.

    Step events carry the step snapshot and the material of the current
    region; every other event carries only the driver's identifier.

    Attributes:
        kind: Scatter step, non-scatter step or other lifecycle event
        event_id: Identifier assigned by the driver
        step: Step snapshot (step events only)
        material: Material composition of the current region (step events only)
    """
    kind: EventKind
    event_id: int
    step: Optional[TransportStep] = None
    material: Optional[MaterialComposition] = None

    @classmethod
    def scatter(cls, step: TransportStep, material: MaterialComposition) -> 'TransportEvent':
        return cls(EventKind.SCATTER, SCATTER_EVENT_ID, step, material)

    @classmethod
    def non_scatter(cls, step: TransportStep, material: MaterialComposition) -> 'TransportEvent':
        return cls(EventKind.NON_SCATTER, NON_SCATTER_EVENT_ID, step, material)

    @classmethod
    def lifecycle(cls, event_id: int) -> 'TransportEvent':
        return cls(EventKind.OTHER, event_id)

    @property
    def is_step(self) -> bool:
        return self.kind in (EventKind.SCATTER, EventKind.NON_SCATTER)


@dataclass(frozen=True, eq=False)
class EmissionRecord:
    """A single weighted Bremsstrahlung photon.

    Attributes:
        position: Emission point in m [3]
        energy: Photon energy in eV
        weight: Statistical weight
        element: Element credited with the emission
        direction: Propagation direction [3]
        generating_energy: Electron kinetic energy at the emission point in eV
    """
    position: np.ndarray
    energy: float
    weight: float
    element: Element
    direction: np.ndarray
    generating_energy: float


@dataclass(frozen=True, eq=False)
class EmissionEvent:
    """Batch of emission records published to listeners.

    Attributes:
        event_id: Identifier of the transport notification that produced the batch
        kind: Kind of that notification
        records: Records accepted during the step (empty for lifecycle events)
    """
    event_id: int
    kind: EventKind
    records: Tuple[EmissionRecord, ...] = ()

    @property
    def is_lifecycle(self) -> bool:
        return self.kind is EventKind.OTHER

    @property
    def total_weight(self) -> float:
        return sum(record.weight for record in self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class PhotonBank:
    """Tensor buffer handing emitted photons to downstream photon transport.

    Positions are float64 because nanometre steps are recorded in metres.

    Attributes:
        positions: Emission positions in m [N, 3]
        directions: Unit direction vectors [N, 3]
        energies: Photon energies in eV [N]
        weights: Statistical weights [N]
        atomic_numbers: Atomic number of the emitting element [N]
        count: Number of photons currently held
        capacity: Maximum bank capacity
    """
    positions: torch.Tensor
    directions: torch.Tensor
    energies: torch.Tensor
    weights: torch.Tensor
    atomic_numbers: torch.Tensor
    count: int
    capacity: int

    @classmethod
    def create_empty(cls, capacity: int, device: str = 'cpu') -> 'PhotonBank':
        """Create an empty photon bank with pre-allocated memory."""
        return cls(
            positions=torch.zeros((capacity, 3), dtype=torch.float64, device=device),
            directions=torch.zeros((capacity, 3), dtype=torch.float64, device=device),
            energies=torch.zeros(capacity, dtype=torch.float64, device=device),
            weights=torch.zeros(capacity, dtype=torch.float64, device=device),
            atomic_numbers=torch.zeros(capacity, dtype=torch.int32, device=device),
            count=0,
            capacity=capacity
        )

    @property
    def device(self) -> torch.device:
        return self.positions.device

    def add_records(self, records: Sequence[EmissionRecord]) -> None:
        """Append emission records to the bank."""
        n_new = len(records)
        if n_new == 0:
            return

        if self.count + n_new > self.capacity:
            raise RuntimeError(
                f"Photon bank overflow: trying to add {n_new} photons to bank "
                f"with {self.capacity - self.count} free slots"
            )

        start_idx = self.count
        end_idx = self.count + n_new
        device = self.device

        self.positions[start_idx:end_idx] = torch.from_numpy(
            np.stack([r.position for r in records])
        ).to(device)
        self.directions[start_idx:end_idx] = torch.from_numpy(
            np.stack([r.direction for r in records])
        ).to(device)
        self.energies[start_idx:end_idx] = torch.tensor(
            [r.energy for r in records], dtype=torch.float64, device=device
        )
        self.weights[start_idx:end_idx] = torch.tensor(
            [r.weight for r in records], dtype=torch.float64, device=device
        )
        self.atomic_numbers[start_idx:end_idx] = torch.tensor(
            [r.element.atomic_number for r in records], dtype=torch.int32, device=device
        )
        self.count += n_new

    def __call__(self, event: EmissionEvent) -> None:
        """Emission listener entry point; lifecycle notifications carry no photons."""
        if event.is_lifecycle:
            return
        self.add_records(event.records)

    def get_active(self) -> 'PhotonBank':
        """Return a view of only the filled slots."""
        n = self.count
        return PhotonBank(
            positions=self.positions[:n],
            directions=self.directions[:n],
            energies=self.energies[:n],
            weights=self.weights[:n],
            atomic_numbers=self.atomic_numbers[:n],
            count=n,
            capacity=n
        )

    def total_weight(self) -> float:
        return float(self.weights[:self.count].sum().item())

    def clear(self) -> None:
        """Reset bank for the next transport batch."""
        self.count = 0
