"""Application-wide configuration constants.

Centralizes all configuration values to make them easy to find, modify, and test.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""

    # Documents
    export_filename: str = "tagged_data.json"
    export_indent: int = 2

    # On-disk asset layout
    image_extension: str = ".jpg"
    split_first_index: int = 1  # UI index N maps to folder split_<N - 1 + split_first_index>

    # Categories
    category_set: str = "materials-v2"
    categories_dir: Path = Path(__file__).resolve().parent.parent / "config" / "categories"

    # Background asset resolution
    asset_worker_limit: int = 4

    # Preferences cache
    cache_dir: Path = field(default_factory=lambda: Path.home() / ".config" / "mask_tagger")
    cache_version: int = 1

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / "cache.yaml"


# Global singleton instance
_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global application configuration.

    Returns:
        AppConfig instance (singleton)
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = AppConfig()
    return _CONFIG


def set_config(config: AppConfig) -> None:
    """Install a configuration built from command line overrides."""
    global _CONFIG
    _CONFIG = config


def reset_config() -> None:
    """Reset configuration to default (mainly for testing)."""
    global _CONFIG
    _CONFIG = None
