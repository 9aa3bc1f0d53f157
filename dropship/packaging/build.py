"""Local server build: export the Linux server pack into the docker context."""

import logging
import os

from dropship.errors import BuildError
from dropship.provisioning.shell import run_shell_cmd

logger = logging.getLogger(__name__)

EXPORT_PRESET = "Server - Linux"
PACK_NAME = "data.pck"


def build_command(build_binary, project_root, artifact_source_dir):
    """Build the export command that writes the .pck into the artifact source dir."""
    return [
        build_binary,
        "--path",
        project_root,
        "--export",
        EXPORT_PRESET,
        os.path.join(artifact_source_dir, PACK_NAME),
    ]


async def build_server(config, dry_run=False) -> str:
    """Run the local build step. A failed build is a showstopper.

    Returns:
        Combined build output.

    Raises:
        BuildError: no build binary configured, or the build exited non-zero.
    """
    if not config.build_binary:
        raise BuildError("No build binary configured (set 'godot_binary_path').")

    logger.info("Local server build is being kicked off, output will be shown below when finished.")
    cmd = build_command(config.build_binary, config.project_root, config.artifact_source_dir)
    rc, stdout, stderr = await run_shell_cmd(cmd, dry_run=dry_run)
    output = stdout + stderr
    if rc != 0:
        raise BuildError(f"Local server build failed (exit {rc})", context=output.strip() or None)
    if output.strip():
        logger.info(output.rstrip())
    return output
