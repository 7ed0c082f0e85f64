"""Configuration management for Bremsstrahlung X-ray generation."""

from dataclasses import dataclass
from typing import Optional
import yaml
from pathlib import Path


@dataclass
class GenerationConfig:
    """Configuration for the Bremsstrahlung emission sampler.

    Attributes:
        min_photon_energy_eV: Photons at or below this energy are discarded
        samples_per_step: Number of weighted sub-samples drawn per transport step
        random_seed: Random seed for reproducibility (None for random)
        low_energy_cut_eV: Lower photon energy cut of the analytic cross-section model
        cross_section_database_path: Optional HDF5 Bremsstrahlung table database
        photon_bank_capacity: Maximum photons held in the tensor hand-off bank
        device: Device for the photon bank tensors ('cuda' or 'cpu')
    """
    min_photon_energy_eV: float = 100.0
    samples_per_step: int = 10
    random_seed: Optional[int] = None
    low_energy_cut_eV: float = 1.0
    cross_section_database_path: Optional[str] = None
    photon_bank_capacity: int = 100000
    device: str = 'cpu'

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters."""
        import torch
        from .logging import get_logger
        logger = get_logger()

        if self.min_photon_energy_eV <= 0:
            raise ValueError(
                f"min_photon_energy_eV must be positive, got {self.min_photon_energy_eV}"
            )

        if isinstance(self.samples_per_step, bool) or not isinstance(self.samples_per_step, int):
            raise ValueError(
                f"samples_per_step must be an integer, got {self.samples_per_step!r}"
            )
        if self.samples_per_step <= 0:
            raise ValueError(f"samples_per_step must be positive, got {self.samples_per_step}")

        if self.random_seed is not None and not isinstance(self.random_seed, int):
            raise ValueError(f"random_seed must be an integer or None, got {self.random_seed!r}")

        if self.low_energy_cut_eV <= 0:
            raise ValueError(f"low_energy_cut_eV must be positive, got {self.low_energy_cut_eV}")

        if self.photon_bank_capacity <= 0:
            raise ValueError(
                f"photon_bank_capacity must be positive, got {self.photon_bank_capacity}"
            )

        if self.device not in ['cuda', 'cpu']:
            raise ValueError(f"device must be 'cuda' or 'cpu', got {self.device}")

        if self.device == 'cuda' and not torch.cuda.is_available():
            logger.warning("CUDA requested but not available, falling back to CPU")
            self.device = 'cpu'

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'GenerationConfig':
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            GenerationConfig instance
        """
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        return cls(**config_dict)

    def to_yaml(self, yaml_path: str) -> None:
        """Save configuration to YAML file.

        Args:
            yaml_path: Path to save YAML configuration
        """
        config_dict = {
            'min_photon_energy_eV': self.min_photon_energy_eV,
            'samples_per_step': self.samples_per_step,
            'random_seed': self.random_seed,
            'low_energy_cut_eV': self.low_energy_cut_eV,
            'cross_section_database_path': self.cross_section_database_path,
            'photon_bank_capacity': self.photon_bank_capacity,
            'device': self.device,
        }

        Path(yaml_path).parent.mkdir(parents=True, exist_ok=True)
        with open(yaml_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)

    @staticmethod
    def get_default_config() -> 'GenerationConfig':
        """Get a default configuration for testing.

        Returns:
            GenerationConfig with reference values and a fixed seed
        """
        return GenerationConfig(
            min_photon_energy_eV=100.0,
            samples_per_step=10,
            random_seed=42,
            device='cpu'
        )
