"""SSH readiness probing."""

import asyncio
import logging

from dropship.provisioning.ssh_transport import make_run_cmd
from dropship.provisioning.types import ProbeResult

logger = logging.getLogger(__name__)

PROBE_CONNECT_TIMEOUT = 5


async def probe_host(creds, attempts=12, interval=10.0, command="uptime", run_cmd=None):
    """Run a liveness command over SSH until it succeeds or attempts run out.

    A failed dial and a failed command each consume one attempt. Sleeps
    *interval* between attempts, never after the last one.

    Args:
        creds: RemoteCredentials for the droplet.
        run_cmd: optional async callable(command) -> CommandResult; defaults to
            a plain SSH runner with a short connect timeout.

    Returns:
        ProbeResult with reachable=True and the command output on success.
    """
    if run_cmd is None:
        run_cmd = make_run_cmd(creds, connect_timeout=PROBE_CONNECT_TIMEOUT)

    logger.info(f"Attempting to see if {creds.address} is reachable...")
    failures = []
    for attempt in range(1, attempts + 1):
        result = await run_cmd(command)
        if result.ok:
            logger.info(f"Server uptime: {result.stdout.strip()}")
            return ProbeResult(reachable=True, output=result.stdout, attempts=attempt, failures=failures)

        failures.append(result)
        logger.debug(f"Probe attempt {attempt}/{attempts} failed (exit {result.returncode}): {result.stderr.strip()}")
        if attempt < attempts:
            logger.info("Still trying...")
            await asyncio.sleep(interval)

    logger.error(f"{creds.address} wasn't reachable after {attempts} attempts.")
    return ProbeResult(reachable=False, attempts=attempts, failures=failures)
