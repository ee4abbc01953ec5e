"""
Configuration management for the Protein Hash engine.

Provides centralized configuration for fingerprinting and comparison
with sensible defaults and validation.
"""

import os
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

SUPPORTED_ALGORITHMS: Tuple[str, ...] = ("sha256", "sha512", "blake2b")


@dataclass
class FingerprintConfig:
    """Configuration for spectral fingerprinting."""

    # Number of top Laplacian eigenvalues kept in the fingerprint
    eigenvalue_count: int = 5

    # Grid used to quantize eigenvalues before hashing
    quantization_levels: int = 1000

    # Digest used for the canonical spectrum string
    algorithm: str = "sha256"

    # Ceiling on logical graph size; the Laplacian is O(n^2) in memory
    max_nodes: int = 2000

    def validate(self) -> None:
        """Raise ValueError when a setting is out of range."""
        if self.eigenvalue_count < 1:
            raise ValueError("eigenvalue_count must be at least 1")
        if self.quantization_levels < 1:
            raise ValueError("quantization_levels must be at least 1")
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported hash algorithm: {self.algorithm} "
                f"(expected one of {', '.join(SUPPORTED_ALGORITHMS)})"
            )
        if self.max_nodes < 1:
            raise ValueError("max_nodes must be at least 1")


@dataclass
class SimilarityConfig:
    """Configuration for fingerprint comparison."""

    # Similarity at or above which two fingerprints are equivalent
    equivalence_threshold: float = 0.95

    # Default threshold for greedy grouping
    grouping_threshold: float = 0.80

    def validate(self) -> None:
        """Raise ValueError when a threshold is outside [0, 1]."""
        for name in ("equivalence_threshold", "grouping_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")


@dataclass
class HasherConfig:
    """Master configuration combining all component configurations."""

    fingerprint: FingerprintConfig = field(default_factory=FingerprintConfig)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)

    # Language assumed when none is given
    default_language: str = "javascript"

    # Enable verbose logging
    verbose: bool = False

    def validate(self) -> None:
        self.fingerprint.validate()
        self.similarity.validate()


class Config:
    """
    Central configuration manager providing access to all settings.

    Supports loading from environment variables and configuration files.
    """

    _instance: Optional["Config"] = None
    _config: HasherConfig = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = HasherConfig()
        return cls._instance

    @classmethod
    def get(cls) -> HasherConfig:
        """Get the current configuration."""
        if cls._instance is None:
            cls()
        return cls._instance._config

    @classmethod
    def reset(cls) -> HasherConfig:
        """Restore default settings (mainly for testing)."""
        instance = cls()
        instance._config = HasherConfig()
        return instance._config

    @classmethod
    def load_from_file(cls, config_path: str) -> HasherConfig:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            Loaded HasherConfig instance.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            data = json.load(f)

        config = cls._dict_to_config(data)
        config.validate()

        instance = cls()
        instance._config = config
        return instance._config

    @classmethod
    def load_from_env(cls) -> HasherConfig:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with PHASH_.

        Returns:
            HasherConfig with environment overrides applied.
        """
        instance = cls()
        config = instance._config

        if os.getenv("PHASH_EIGENVALUE_COUNT"):
            config.fingerprint.eigenvalue_count = int(os.getenv("PHASH_EIGENVALUE_COUNT"))

        if os.getenv("PHASH_QUANTIZATION_LEVELS"):
            config.fingerprint.quantization_levels = int(
                os.getenv("PHASH_QUANTIZATION_LEVELS")
            )

        if os.getenv("PHASH_ALGORITHM"):
            config.fingerprint.algorithm = os.getenv("PHASH_ALGORITHM").lower()

        if os.getenv("PHASH_MAX_NODES"):
            config.fingerprint.max_nodes = int(os.getenv("PHASH_MAX_NODES"))

        if os.getenv("PHASH_LANGUAGE"):
            config.default_language = os.getenv("PHASH_LANGUAGE").lower()

        if os.getenv("PHASH_VERBOSE"):
            config.verbose = os.getenv("PHASH_VERBOSE").lower() in ("true", "1", "yes")

        config.validate()
        return config

    @staticmethod
    def _dict_to_config(data: dict) -> HasherConfig:
        """Convert a dictionary to HasherConfig."""
        config = HasherConfig()

        if "fingerprint" in data:
            config.fingerprint = FingerprintConfig(**data["fingerprint"])

        if "similarity" in data:
            config.similarity = SimilarityConfig(**data["similarity"])

        if "default_language" in data:
            config.default_language = data["default_language"]

        if "verbose" in data:
            config.verbose = data["verbose"]

        return config

    @classmethod
    def save_to_file(cls, config_path: str) -> None:
        """
        Save current configuration to a JSON file.

        Args:
            config_path: Path to save the configuration file.
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config = cls.get()
        data = cls._config_to_dict(config)

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def _config_to_dict(config: HasherConfig) -> dict:
        """Convert HasherConfig to a dictionary."""
        return {
            "fingerprint": {
                "eigenvalue_count": config.fingerprint.eigenvalue_count,
                "quantization_levels": config.fingerprint.quantization_levels,
                "algorithm": config.fingerprint.algorithm,
                "max_nodes": config.fingerprint.max_nodes,
            },
            "similarity": {
                "equivalence_threshold": config.similarity.equivalence_threshold,
                "grouping_threshold": config.similarity.grouping_threshold,
            },
            "default_language": config.default_language,
            "verbose": config.verbose,
        }
