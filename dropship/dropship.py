#!/usr/bin/env python3
"""Droplet deployment tool: CLI entrypoint."""

import argparse

from dropship.commands.build import register_build_command
from dropship.commands.deploy import register_deploy_command
from dropship.commands.destroy import register_destroy_command
from dropship.logging_setup import setup_cli_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description="Provision a droplet and deploy the game server to it")
    parser.add_argument("-v", "--verbose", action="store_true", help="Timestamped, debug-level log output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_deploy_command(subparsers)
    register_build_command(subparsers)
    register_destroy_command(subparsers)

    args = parser.parse_args(argv)
    setup_cli_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
