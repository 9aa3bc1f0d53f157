"""Deploy orchestration: provision + package, probe, transfer, bootstrap."""

import asyncio
import logging
import os
from dataclasses import dataclass, field

from dropship.deploy.bootstrap import bootstrap_commands
from dropship.deploy.pipeline import run_pipeline
from dropship.deploy.rendezvous import rendezvous
from dropship.errors import ConfigError, HostUnreachableError, PackagingError, RendezvousTimeoutError
from dropship.packaging.archive import package_directory
from dropship.provisioning.ssh import PROBE_CONNECT_TIMEOUT, probe_host
from dropship.provisioning.ssh_transport import make_copy_file, make_run_cmd
from dropship.provisioning.types import CommandResult, RemoteCredentials, VMInstance

logger = logging.getLogger(__name__)


@dataclass
class DeploymentResult:
    """What a completed deployment produced."""

    droplet_id: int
    instance: VMInstance
    artifact_path: str
    probe_attempts: int = 0
    results: list[CommandResult] = field(default_factory=list)


def check_private_key(path):
    """Fail early if the SSH private key can't be read."""
    try:
        with open(path, "rb"):
            pass
    except OSError as e:
        raise ConfigError(f"Cannot read SSH private key '{path}'", context=str(e)) from e


async def run_deploy(config, client, make_run=make_run_cmd, make_copy=make_copy_file, dry_run=False) -> DeploymentResult:
    """Run an entire deployment to a new droplet.

    Args:
        config: DeploymentConfig.
        client: DigitalOceanClient (or anything with the same coroutine methods).
        make_run: factory(creds, **kwargs) -> async run_cmd(command) -> CommandResult.
        make_copy: factory(creds, **kwargs) -> async copy_file(local, remote) -> int.
        dry_run: log remote actions instead of executing them.

    Raises:
        DropshipError: any unrecoverable failure. Nothing here exits the process.
    """
    if not dry_run:
        check_private_key(config.ssh_private_key)

    await client.verify_account()
    await client.list_ssh_keys()

    # Create first so the droplet boots while the archive is built
    droplet_id = await client.create_droplet(config.droplet)

    package = asyncio.to_thread(package_directory, config.artifact_source_dir, os.path.abspath(config.archive_name))
    provision = client.poll_for_address(config.droplet.tag, interval=config.poll_interval)
    try:
        joined = await rendezvous(package, provision, deadline=config.rendezvous_deadline)
    except PackagingError:
        logger.error(f"Packaging failed; droplet {droplet_id} (tag '{config.droplet.tag}') was left running.")
        logger.error("Remove it with: dropship destroy --now")
        raise

    if joined.instance is None:
        raise RendezvousTimeoutError(
            f"No droplet tagged '{config.droplet.tag}' had a public IP after {config.rendezvous_deadline:g}s."
        )
    if joined.artifact_path is None:
        raise RendezvousTimeoutError(f"Archive of {config.artifact_source_dir} wasn't ready after {config.rendezvous_deadline:g}s.")

    creds = RemoteCredentials(
        host=joined.instance.public_ip,
        username=config.remote_user,
        key_path=config.ssh_private_key,
    )

    # Can't do anything with the droplet until it's reachable via ssh
    probe = await probe_host(
        creds,
        attempts=config.probe.attempts,
        interval=config.probe.interval,
        command=config.probe.command,
        run_cmd=make_run(creds, connect_timeout=PROBE_CONNECT_TIMEOUT, dry_run=dry_run),
    )
    if not probe.reachable:
        raise HostUnreachableError(f"Droplet wasn't reachable after {config.probe.attempts} attempts.")

    results = await run_pipeline(
        joined.artifact_path,
        config.remote_archive_path,
        bootstrap_commands(config),
        run_cmd=make_run(creds, remote_dir=config.remote_dir, dry_run=dry_run),
        copy_file=make_copy(creds, dry_run=dry_run),
    )

    logger.info(f"ID of droplet created in this run: {droplet_id}")
    logger.info("Deployment complete!")
    # In case you want to ssh in directly
    logger.info(f"\nssh -i {creds.key_path} {creds.address}\n")

    return DeploymentResult(
        droplet_id=droplet_id,
        instance=joined.instance,
        artifact_path=joined.artifact_path,
        probe_attempts=probe.attempts,
        results=results,
    )


async def run_destroy(config, client) -> None:
    """Delete every droplet carrying the configured tag."""
    await client.verify_account()
    await client.delete_droplets_by_tag(config.droplet.tag)
