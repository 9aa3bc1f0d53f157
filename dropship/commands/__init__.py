"""CLI subcommands and their shared plumbing."""

import asyncio
import logging
import os
import sys

from dropship.config import load_config
from dropship.errors import DropshipError
from dropship.provisioning.digitalocean import TOKEN_ENV_VAR, DigitalOceanClient, resolve_token

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"


def run_async(coro_fn, args):
    """Run an async handler; any DropshipError becomes a logged non-zero exit."""
    try:
        asyncio.run(coro_fn(args))
    except DropshipError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


def make_client(dry_run=False):
    """Build the provider client from the environment token."""
    if dry_run:
        return DigitalOceanClient(os.environ.get(TOKEN_ENV_VAR, ""), dry_run=True)
    return DigitalOceanClient(resolve_token())


def add_common_arguments(parser, gated=True):
    """Add the config path and, for live actions, the --now / --dry-run gates."""
    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to deployment config JSON file (default: {DEFAULT_CONFIG_PATH})",
    )
    if gated:
        parser.add_argument("--now", action="store_true", help="Actually do it. Without this flag nothing happens.")
    parser.add_argument("--dry-run", action="store_true", help="Print requests and commands without executing")


def load_config_or_exit(path):
    """Load the config, exiting non-zero on any config error."""
    try:
        return load_config(path)
    except DropshipError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
