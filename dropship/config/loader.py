"""Config loading, validation, and path resolution."""

import logging
import os

import yaml

from dropship.config.types import DeploymentConfig
from dropship.errors import ConfigError

logger = logging.getLogger(__name__)

# Relative to the project root when artifact_source_dir is not given
DEFAULT_ARTIFACT_SOURCE_DIR = "extras/deploy/container"

REQUIRED_FIELDS = ["droplet", "remoteusername", "sshprivatekey", "zipfilename"]
REQUIRED_DROPLET_FIELDS = ["name", "sizeslug", "imageslug", "region", "tag", "sshkeyid"]


def _expand_path(path: str, base: str | None = None) -> str:
    """Expand ~ and env vars, then make *path* absolute (against *base* or cwd)."""
    path = os.path.expanduser(os.path.expandvars(path))
    if not os.path.isabs(path) and base:
        path = os.path.join(base, path)
    return os.path.abspath(path)


def _migrate_legacy_keys(d):
    """Accept f3d_repo_root as the older spelling of project_root."""
    if "f3d_repo_root" in d and "project_root" not in d:
        d["project_root"] = d.pop("f3d_repo_root")
    return d


def validate_config(d) -> None:
    """Raise ConfigError if required fields are missing or malformed."""
    if not isinstance(d, dict):
        raise ConfigError("Config must be a mapping at the top level")

    missing = [f for f in REQUIRED_FIELDS if f not in d]
    if missing:
        raise ConfigError(f"Missing required config field(s): {', '.join(missing)}")

    droplet = d["droplet"]
    if not isinstance(droplet, dict):
        raise ConfigError("'droplet' must be a mapping")
    missing = [f for f in REQUIRED_DROPLET_FIELDS if f not in droplet]
    if missing:
        raise ConfigError(f"Missing field(s) in 'droplet' section: {', '.join(missing)}")

    try:
        int(droplet["sshkeyid"])
    except (TypeError, ValueError):
        raise ConfigError(f"'droplet.sshkeyid' must be an integer, got {droplet['sshkeyid']!r}") from None

    commands = d.get("commands")
    if commands is not None and (not isinstance(commands, list) or not all(isinstance(c, str) for c in commands)):
        raise ConfigError("'commands' must be a list of strings")

    probe = d.get("probe")
    if probe is not None:
        if not isinstance(probe, dict):
            raise ConfigError("'probe' must be a mapping")
        try:
            attempts = int(probe.get("attempts", 1))
        except (TypeError, ValueError):
            raise ConfigError(f"'probe.attempts' must be an integer, got {probe['attempts']!r}") from None
        if attempts < 1:
            raise ConfigError(f"'probe.attempts' must be at least 1, got {attempts}")

    if str(d["sshprivatekey"]).endswith(".pub"):
        raise ConfigError("Use your _private_ key. Hint: it usually doesn't end in .pub.")


def resolve_paths(d):
    """Make every filesystem path in the config dict absolute."""
    d["project_root"] = _expand_path(d.get("project_root") or ".")
    d["sshprivatekey"] = _expand_path(d["sshprivatekey"])
    d["artifact_source_dir"] = _expand_path(
        d.get("artifact_source_dir") or DEFAULT_ARTIFACT_SOURCE_DIR,
        base=d["project_root"],
    )
    if d.get("godot_binary_path"):
        d["godot_binary_path"] = _expand_path(d["godot_binary_path"])
    else:
        d["godot_binary_path"] = None
    return d


def load_config(config_path: str = "config.json") -> DeploymentConfig:
    """Load a deployment config from a JSON (or YAML) file.

    JSON is a subset of YAML, so one parser handles both.
    """
    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file '{config_path}' not found.") from None
    except OSError as e:
        raise ConfigError(f"Error loading your configuration file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing config '{config_path}': {e}") from e

    d = _migrate_legacy_keys(raw) if isinstance(raw, dict) else raw
    validate_config(d)
    d = resolve_paths(d)
    try:
        config = DeploymentConfig.from_dict(d)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in config '{config_path}': {e}") from e

    logger.debug(f"Loaded config from {config_path}: droplet tag '{config.droplet.tag}'")
    return config
