"""Shared data types for provisioning and remote execution."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class VMInstance:
    """A provider-side droplet as seen in one listing.

    Re-fetching status yields a new record; instances are never patched.
    """

    id: int
    name: str = ""
    tags: tuple[str, ...] = ()
    public_ipv4: tuple[str, ...] = ()
    status: str = ""

    @property
    def public_ip(self) -> str | None:
        """First non-empty public IPv4 address, or None if none has been assigned."""
        for address in self.public_ipv4:
            if address:
                return address
        return None

    @classmethod
    def from_api(cls, droplet: dict) -> "VMInstance":
        """Build from a DigitalOcean droplet object.

        Only public addresses are kept. VPC-private ones aren't reachable over SSH.
        """
        v4 = (droplet.get("networks") or {}).get("v4") or []
        public = [n.get("ip_address", "") for n in v4 if n.get("type") == "public"]
        return cls(
            id=droplet.get("id", 0),
            name=droplet.get("name", ""),
            tags=tuple(droplet.get("tags") or ()),
            public_ipv4=tuple(public),
            status=droplet.get("status", ""),
        )


class PollStatus(Enum):
    """Outcome of a single address-poll attempt."""

    READY = "ready"
    NOT_READY = "not_ready"
    TRANSIENT_ERROR = "transient_error"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class PollResult:
    """Tagged result of one poll: callers retry only NOT_READY and TRANSIENT_ERROR."""

    status: PollStatus
    instance: VMInstance | None = None
    error: Exception | None = None

    @property
    def retryable(self) -> bool:
        return self.status in (PollStatus.NOT_READY, PollStatus.TRANSIENT_ERROR)


@dataclass(frozen=True)
class RemoteCredentials:
    """Everything needed to open an SSH session to the droplet. Never persisted."""

    host: str
    username: str
    key_path: str
    port: int = 22

    @property
    def address(self) -> str:
        """SSH address string (user@host)."""
        return f"{self.username}@{self.host}" if self.username else self.host


@dataclass
class CommandResult:
    """Captured output of one remote command invocation."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class ProbeResult:
    """Outcome of the connectivity probe."""

    reachable: bool
    output: str = ""
    attempts: int = 0
    failures: list[CommandResult] = field(default_factory=list)
