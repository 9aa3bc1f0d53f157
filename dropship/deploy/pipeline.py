"""Remote execution pipeline: verified artifact transfer, then fail-fast commands."""

import logging
import os

from dropship.errors import RemoteCommandError, TransferError, TransferIntegrityError

logger = logging.getLogger(__name__)


async def transfer_artifact(local_path, remote_path, copy_file) -> int:
    """Copy the archive to the droplet and verify the byte count.

    Args:
        copy_file: async callable(local_path, remote_path) -> bytes written remotely.

    Returns:
        Number of bytes written.

    Raises:
        TransferIntegrityError: remote size differs from the local file. Not retried.
    """
    try:
        size = os.path.getsize(local_path)
    except OSError as e:
        raise TransferError(f"Cannot read local archive '{local_path}'", context=str(e)) from e

    logger.info(f"Remote file: {remote_path}")
    logger.info(f"Local file: {local_path}")
    logger.info(f"Writing {size} bytes")
    logger.info("This might take a couple minutes...")

    written = await copy_file(local_path, remote_path)
    if written != size:
        raise TransferIntegrityError(expected=size, written=written, remote_path=remote_path)
    logger.info(f"Wrote {written} bytes")
    return written


async def run_commands(commands, run_cmd):
    """Run *commands* strictly in order, stopping at the first failure.

    Each command gets its own session; its stdout is logged as-is.

    Args:
        run_cmd: async callable(command) -> CommandResult.

    Returns:
        List of CommandResult, one per command.

    Raises:
        RemoteCommandError: a command exited non-zero. Later commands are not run.
    """
    results = []
    for command in commands:
        logger.info(f"Executing remote command: '{command}'")
        result = await run_cmd(command)
        if result.stdout:
            logger.info(result.stdout.rstrip("\n"))
        if not result.ok:
            if result.stderr:
                logger.error(result.stderr.rstrip("\n"))
            raise RemoteCommandError(result, completed=results)
        results.append(result)
    return results


async def run_pipeline(local_path, remote_path, commands, run_cmd, copy_file):
    """Transfer phase, then command phase. An integrity failure skips all commands."""
    await transfer_artifact(local_path, remote_path, copy_file)
    return await run_commands(commands, run_cmd)
