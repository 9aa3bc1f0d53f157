"""Tests for the SSH connectivity probe."""

import asyncio

import pytest

import dropship.provisioning.ssh as ssh_module
from dropship.provisioning.ssh import probe_host
from dropship.provisioning.types import CommandResult, RemoteCredentials

CREDS = RemoteCredentials(host="203.0.113.5", username="root", key_path="/keys/id_ed25519")


@pytest.fixture
def sleeps(monkeypatch):
    """Record probe sleeps instead of waiting."""
    recorded = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay, *args, **kwargs):
        recorded.append(delay)
        await real_sleep(0)

    monkeypatch.setattr(ssh_module.asyncio, "sleep", fake_sleep)
    return recorded


def _runner(succeed_on=None):
    """run_cmd that fails until attempt *succeed_on* (None: always fails)."""
    calls = []

    async def run_cmd(command):
        calls.append(command)
        if succeed_on is not None and len(calls) >= succeed_on:
            return CommandResult(command=command, returncode=0, stdout=" 12:00:01 up 2 min\n")
        return CommandResult(command=command, returncode=255, stderr="ssh: connect to host: Connection refused")

    return run_cmd, calls


@pytest.mark.parametrize("k", [1, 3, 10])
async def test_succeeds_on_attempt_k(sleeps, k):
    run_cmd, calls = _runner(succeed_on=k)
    result = await probe_host(CREDS, attempts=10, interval=10, run_cmd=run_cmd)

    assert result.reachable
    assert result.attempts == k
    assert len(calls) == k
    assert "up 2 min" in result.output
    # No sleep after the successful attempt
    assert sleeps == [10] * (k - 1)


async def test_always_failing_exhausts_budget(sleeps):
    run_cmd, calls = _runner()
    result = await probe_host(CREDS, attempts=12, interval=10, run_cmd=run_cmd)

    assert not result.reachable
    assert result.attempts == 12
    assert len(calls) == 12
    assert len(result.failures) == 12
    assert sleeps == [10] * 11


async def test_probe_runs_configured_command(sleeps):
    run_cmd, calls = _runner(succeed_on=1)
    await probe_host(CREDS, attempts=3, interval=1, command="true", run_cmd=run_cmd)
    assert calls == ["true"]


async def test_command_failure_and_dial_failure_both_count(sleeps):
    outcomes = [
        CommandResult(command="uptime", returncode=255, stderr="Connection timed out"),
        CommandResult(command="uptime", returncode=1, stderr="uptime: not found"),
        CommandResult(command="uptime", returncode=0, stdout="up"),
    ]

    async def run_cmd(command):
        return outcomes.pop(0)

    result = await probe_host(CREDS, attempts=3, interval=5, run_cmd=run_cmd)
    assert result.reachable
    assert result.attempts == 3
    assert sleeps == [5, 5]
