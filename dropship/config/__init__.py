"""Deployment config: types and loading."""

from dropship.config.loader import load_config, resolve_paths, validate_config
from dropship.config.types import DeploymentConfig, DropletSpec, ProbePolicy

__all__ = [
    "DeploymentConfig",
    "DropletSpec",
    "ProbePolicy",
    "load_config",
    "resolve_paths",
    "validate_config",
]
