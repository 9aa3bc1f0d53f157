"""Rendezvous of the two background operations: archive packaging and droplet address polling."""

import asyncio
import logging
from dataclasses import dataclass

from dropship.provisioning.types import VMInstance

logger = logging.getLogger(__name__)


@dataclass
class RendezvousResult:
    """Whatever was bound when the join finished. Missing values are None."""

    artifact_path: str | None = None
    instance: VMInstance | None = None
    timed_out: bool = False

    @property
    def complete(self) -> bool:
        return self.artifact_path is not None and self.instance is not None


async def _cancel(tasks):
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def rendezvous(package, provision, deadline=60.0) -> RendezvousResult:
    """Run *package* and *provision* concurrently and join both under one deadline.

    Args:
        package: awaitable resolving to the archive path.
        provision: awaitable resolving to a VMInstance with an address.
        deadline: seconds to wait for both.

    Completion order doesn't matter. When the deadline passes, the
    outstanding task is cancelled and the partial result is returned with
    timed_out=True. If either task raises, the other is cancelled and the
    exception propagates.
    """
    package_task = asyncio.ensure_future(package)
    provision_task = asyncio.ensure_future(provision)
    pending = {package_task, provision_task}
    result = RendezvousResult()

    loop = asyncio.get_running_loop()
    deadline_at = loop.time() + deadline
    try:
        while pending:
            remaining = deadline_at - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED)
            if not done:
                break
            for task in done:
                # Raises the task's exception, if any
                value = task.result()
                if task is provision_task:
                    logger.info("Droplet finished provisioning")
                    logger.info(f"Droplet public IP: {value.public_ip}")
                    result.instance = value
                else:
                    logger.info(f"Archive ready: {value}")
                    result.artifact_path = value
    except BaseException:
        await _cancel(pending)
        raise

    if pending:
        # Shouldn't take longer than the deadline
        logger.warning("Timeout reached when provisioning droplet and/or zipping docker context.")
        result.timed_out = True
        await _cancel(pending)
    return result
