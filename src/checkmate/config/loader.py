"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from checkmate.config.models import CheckmateConfig


def load_config(path: Path | str) -> CheckmateConfig:
    """Load configuration from YAML file.

    Missing sections take their defaults; an empty file yields the default
    configuration.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated CheckmateConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    return CheckmateConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).parent.parent.parent.parent / "configs" / "default.yaml"
