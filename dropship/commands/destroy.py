"""Destroy command: delete every droplet carrying the configured tag."""

import logging

from dropship.commands import add_common_arguments, load_config_or_exit, make_client, run_async
from dropship.deploy.orchestrate import run_destroy

logger = logging.getLogger(__name__)


def handle_destroy(args):
    """CLI handler for 'destroy'."""
    config = load_config_or_exit(args.config)
    if not args.now and not args.dry_run:
        logger.info(f"Would delete all droplets tagged '{config.droplet.tag}'. Pass --now to proceed.")
        return
    args.loaded_config = config
    run_async(_handle_destroy, args)


async def _handle_destroy(args):
    client = make_client(dry_run=args.dry_run)
    await run_destroy(args.loaded_config, client)


def register_destroy_command(subparsers):
    """Register the destroy subcommand."""
    parser = subparsers.add_parser("destroy", help="Delete all droplets carrying the configured tag")
    add_common_arguments(parser)
    parser.set_defaults(func=handle_destroy)
