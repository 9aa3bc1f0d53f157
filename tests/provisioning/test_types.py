"""Tests for provisioning data types."""

from dropship.provisioning.types import CommandResult, PollResult, PollStatus, VMInstance


def test_vm_instance_from_api_keeps_public_only():
    droplet = {
        "id": 7,
        "name": "demo-server",
        "status": "active",
        "tags": ["demo"],
        "networks": {
            "v4": [
                {"ip_address": "10.0.0.2", "type": "private"},
                {"ip_address": "203.0.113.5", "type": "public"},
            ]
        },
    }
    instance = VMInstance.from_api(droplet)
    assert instance.id == 7
    assert instance.tags == ("demo",)
    assert instance.public_ipv4 == ("203.0.113.5",)
    assert instance.public_ip == "203.0.113.5"


def test_vm_instance_without_networks():
    instance = VMInstance.from_api({"id": 7, "networks": {"v4": []}})
    assert instance.public_ip is None
    assert VMInstance.from_api({"id": 8}).public_ipv4 == ()


def test_vm_instance_private_address_is_not_public():
    droplet = {"id": 7, "networks": {"v4": [{"ip_address": "10.0.0.2", "type": "private"}]}}
    instance = VMInstance.from_api(droplet)
    assert instance.public_ipv4 == ()
    assert instance.public_ip is None


def test_vm_instance_skips_empty_addresses():
    assert VMInstance(id=1, public_ipv4=("", "203.0.113.9")).public_ip == "203.0.113.9"


def test_poll_result_retryable():
    assert PollResult(PollStatus.NOT_READY).retryable
    assert PollResult(PollStatus.TRANSIENT_ERROR).retryable
    assert not PollResult(PollStatus.FATAL_ERROR).retryable
    assert not PollResult(PollStatus.READY).retryable


def test_command_result_ok():
    assert CommandResult("true", 0).ok
    assert not CommandResult("false", 1).ok
