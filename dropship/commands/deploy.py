"""Deploy command: full run to a new droplet."""

import logging

from dropship.commands import add_common_arguments, load_config_or_exit, make_client, run_async
from dropship.deploy.orchestrate import run_deploy

logger = logging.getLogger(__name__)


def handle_deploy(args):
    """CLI handler for 'deploy'."""
    config = load_config_or_exit(args.config)
    # This prevents accidental deployments; --now is an "are you sure?"
    if not args.now and not args.dry_run:
        logger.info(f"Would deploy droplet '{config.droplet.name}' (tag '{config.droplet.tag}'). Pass --now to proceed.")
        return
    args.loaded_config = config
    run_async(_handle_deploy, args)


async def _handle_deploy(args):
    client = make_client(dry_run=args.dry_run)
    await run_deploy(args.loaded_config, client, dry_run=args.dry_run)


def register_deploy_command(subparsers):
    """Register the deploy subcommand."""
    parser = subparsers.add_parser("deploy", help="Run an entire deployment to a new droplet")
    add_common_arguments(parser)
    parser.set_defaults(func=handle_deploy)
