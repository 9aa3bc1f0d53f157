"""Build command: build the Linux server locally and exit."""

from dropship.commands import add_common_arguments, load_config_or_exit, run_async
from dropship.packaging.build import build_server


def handle_build(args):
    """CLI handler for 'build'. Never touches remote infrastructure."""
    args.loaded_config = load_config_or_exit(args.config)
    run_async(_handle_build, args)


async def _handle_build(args):
    await build_server(args.loaded_config, dry_run=args.dry_run)


def register_build_command(subparsers):
    """Register the build subcommand."""
    parser = subparsers.add_parser(
        "build",
        help="Build the linux server, move it into the docker context, and exit",
    )
    add_common_arguments(parser, gated=False)
    parser.set_defaults(func=handle_build)
