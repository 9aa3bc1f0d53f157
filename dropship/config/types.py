"""Deployment config dataclass types."""

import os
from dataclasses import dataclass, field

DEFAULT_SERVICE_NAME = "fugitive-server"
DEFAULT_PORTS = (31000,)


@dataclass(frozen=True)
class DropletSpec:
    """Parameters for the single droplet created per run.

    ssh_key_id is the integer id DigitalOcean assigns to an uploaded public key.
    """

    name: str
    size: str
    image: str
    region: str
    tag: str
    ssh_key_id: int


@dataclass(frozen=True)
class ProbePolicy:
    """Liveness probe retry policy."""

    attempts: int = 12
    interval: float = 10.0
    command: str = "uptime"


@dataclass(frozen=True)
class DeploymentConfig:
    """Immutable parameters for a single deployment run."""

    droplet: DropletSpec
    remote_user: str
    ssh_private_key: str  # absolute path
    artifact_source_dir: str  # absolute path
    archive_name: str
    project_root: str = ""  # absolute path, used by the local build step
    build_binary: str | None = None  # absolute path
    download_url: str | None = None
    rendezvous_deadline: float = 60.0
    poll_interval: float = 5.0
    probe: ProbePolicy = field(default_factory=ProbePolicy)
    remote_dir: str = "/root"
    service: str = DEFAULT_SERVICE_NAME
    ports: tuple[int, ...] = DEFAULT_PORTS
    commands: tuple[str, ...] | None = None

    @property
    def archive_filename(self) -> str:
        """Bare archive file name, as unpacked on the droplet."""
        return os.path.basename(self.archive_name)

    @property
    def remote_archive_path(self) -> str:
        """Where the archive lands on the droplet."""
        return f"{self.remote_dir.rstrip('/')}/{self.archive_filename}"

    @classmethod
    def from_dict(cls, d: dict) -> "DeploymentConfig":
        """Build a DeploymentConfig from a validated, path-resolved config dict."""
        droplet_dict = d["droplet"]
        droplet = DropletSpec(
            name=droplet_dict["name"],
            size=droplet_dict["sizeslug"],
            image=droplet_dict["imageslug"],
            region=droplet_dict["region"],
            tag=droplet_dict["tag"],
            ssh_key_id=int(droplet_dict["sshkeyid"]),
        )

        probe_dict = d.get("probe") or {}
        probe = ProbePolicy(
            attempts=int(probe_dict.get("attempts", 12)),
            interval=float(probe_dict.get("interval", 10.0)),
            command=probe_dict.get("command", "uptime"),
        )

        commands = d.get("commands")
        return cls(
            droplet=droplet,
            remote_user=d["remoteusername"],
            ssh_private_key=d["sshprivatekey"],
            artifact_source_dir=d["artifact_source_dir"],
            archive_name=d["zipfilename"],
            project_root=d.get("project_root", ""),
            build_binary=d.get("godot_binary_path"),
            download_url=d.get("godot_linux_server_url"),
            rendezvous_deadline=float(d.get("rendezvous_deadline", 60.0)),
            poll_interval=float(d.get("poll_interval", 5.0)),
            probe=probe,
            remote_dir=d.get("remote_dir", "/root"),
            service=d.get("service", DEFAULT_SERVICE_NAME),
            ports=tuple(int(p) for p in d.get("ports", DEFAULT_PORTS)),
            commands=tuple(commands) if commands is not None else None,
        )
