"""SSH transport: run commands and copy files to the droplet via ssh/scp.

Every call opens and closes its own session; nothing is pooled.
"""

import logging
import os
import shlex
import time

from dropship.errors import TransferError
from dropship.provisioning.shell import run_shell_cmd
from dropship.provisioning.types import CommandResult

logger = logging.getLogger(__name__)

# What ssh itself exits with when it can't connect; a missing binary reports the same
SSH_ERROR_RC = 255

_COMMON_OPTS = [
    "-o", "StrictHostKeyChecking=no",
    "-o", "UserKnownHostsFile=/dev/null",
    "-o", "BatchMode=yes",
    "-o", "ServerAliveInterval=60",
    "-o", "ServerAliveCountMax=5",
]


def ssh_base_args(creds, connect_timeout=None):
    """Build base SSH arguments for *creds* (a RemoteCredentials).

    The droplet is brand new, so its host key is never known in advance.
    """
    args = ["ssh", *_COMMON_OPTS]
    if connect_timeout:
        args += ["-o", f"ConnectTimeout={connect_timeout}"]
    if creds.key_path:
        args += ["-i", creds.key_path]
    if creds.port and creds.port != 22:
        args += ["-p", str(creds.port)]
    args.append(creds.address)
    return args


def scp_args(creds, local_path, remote_path):
    """Build scp arguments copying *local_path* to *remote_path* on the droplet."""
    args = ["scp", *_COMMON_OPTS]
    if creds.key_path:
        args += ["-i", creds.key_path]
    if creds.port and creds.port != 22:
        args += ["-P", str(creds.port)]
    args += [local_path, f"{creds.address}:{remote_path}"]
    return args


def make_run_cmd(creds, remote_dir=None, connect_timeout=None, dry_run=False):
    """Create a run_cmd callable executing one command per fresh SSH session.

    The returned coroutine function takes (command, timeout=None) and returns
    a CommandResult. By default there is no client-side timeout: a hang on the
    remote end blocks the caller.
    """

    async def run_cmd(command, timeout=None):
        full_cmd = f"cd {shlex.quote(remote_dir)} && {command}" if remote_dir else command
        if dry_run:
            logger.info(f"[dry-run] ssh {creds.address}: {full_cmd}")
            return CommandResult(command=command, returncode=0)

        args = ssh_base_args(creds, connect_timeout=connect_timeout)
        args.append(full_cmd)
        rc, stdout, stderr = await run_shell_cmd(args, timeout=timeout, not_found_rc=SSH_ERROR_RC)
        if rc != 0 and stderr:
            logger.debug(f"SSH error ({creds.address}): {stderr.strip()}")
        return CommandResult(command=command, returncode=rc, stdout=stdout, stderr=stderr)

    return run_cmd


async def scp_file(creds, local_path, remote_path, timeout=None):
    """Copy a file to the droplet via SCP, overwriting anything at remote_path.

    Returns:
        (returncode, stderr) tuple
    """
    rc, _, stderr = await run_shell_cmd(scp_args(creds, local_path, remote_path), timeout=timeout, not_found_rc=SSH_ERROR_RC)
    return rc, stderr


def make_copy_file(creds, dry_run=False):
    """Create a copy_file callable: SCP the file, then read back the remote byte count.

    The returned coroutine function takes (local_path, remote_path) and returns
    the number of bytes present at remote_path after the copy.
    """
    run_cmd = make_run_cmd(creds, dry_run=dry_run)

    async def copy_file(local_path, remote_path):
        if dry_run:
            logger.info(f"[dry-run] scp {local_path} -> {creds.address}:{remote_path}")
            return os.path.getsize(local_path)

        t1 = time.monotonic()
        rc, stderr = await scp_file(creds, local_path, remote_path)
        if rc != 0:
            raise TransferError(f"SCP of {local_path} to {creds.address}:{remote_path} failed (exit {rc})", context=stderr.strip() or None)
        logger.info(f"Copied in {time.monotonic() - t1:.1f}s")

        result = await run_cmd(f"wc -c < {shlex.quote(remote_path)}")
        if not result.ok:
            raise TransferError(f"Could not read size of {remote_path} on {creds.address}", context=result.stderr.strip() or None)
        try:
            return int(result.stdout.strip())
        except ValueError:
            raise TransferError(f"Unexpected size output for {remote_path}: {result.stdout.strip()!r}") from None

    return copy_file
