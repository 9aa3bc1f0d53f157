"""Droplet provisioning: provider client, SSH probing and transport, shell helpers."""

from dropship.provisioning.digitalocean import DigitalOceanClient, resolve_token
from dropship.provisioning.shell import run_shell_cmd
from dropship.provisioning.ssh import probe_host
from dropship.provisioning.ssh_transport import (
    make_copy_file,
    make_run_cmd,
    scp_file,
    ssh_base_args,
)
from dropship.provisioning.types import (
    CommandResult,
    PollResult,
    PollStatus,
    ProbeResult,
    RemoteCredentials,
    VMInstance,
)

__all__ = [
    "DigitalOceanClient",
    "resolve_token",
    "run_shell_cmd",
    "probe_host",
    "ssh_base_args",
    "make_run_cmd",
    "make_copy_file",
    "scp_file",
    "CommandResult",
    "PollResult",
    "PollStatus",
    "ProbeResult",
    "RemoteCredentials",
    "VMInstance",
]
