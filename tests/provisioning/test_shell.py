"""Tests for the local subprocess helper."""

import sys

from dropship.provisioning.shell import run_shell_cmd


async def test_captures_output_and_returncode():
    rc, stdout, stderr = await run_shell_cmd([sys.executable, "-c", "import sys; print('out'); sys.exit(3)"])
    assert rc == 3
    assert stdout == "out\n"
    assert stderr == ""


async def test_missing_binary_default_returncode():
    rc, _, stderr = await run_shell_cmd(["/nonexistent/dropship-test-binary"])
    assert rc == 1
    assert "not found" in stderr


async def test_missing_binary_custom_returncode():
    rc, _, _ = await run_shell_cmd(["/nonexistent/dropship-test-binary"], not_found_rc=255)
    assert rc == 255


async def test_timeout_kills_process():
    rc, _, stderr = await run_shell_cmd([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.5)
    assert rc == 1
    assert stderr == "timeout"


async def test_dry_run_executes_nothing(caplog):
    with caplog.at_level("INFO"):
        rc, stdout, _ = await run_shell_cmd(["rm", "-rf", "/definitely-not-run"], dry_run=True)
    assert (rc, stdout) == (0, "")
    assert "[dry-run] rm -rf /definitely-not-run" in caplog.text
