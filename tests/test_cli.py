"""CLI tests: gating, config errors and build-only mode, run as a subprocess."""

import json


def test_no_command_prints_usage(run_cli):
    rc, _, stderr = run_cli()
    assert rc != 0
    assert "usage" in stderr.lower()


def test_deploy_without_now_is_a_no_op(run_cli, raw_config, write_config):
    rc, stdout, _ = run_cli("deploy", "-c", write_config(raw_config), env={"DIGITALOCEAN_TOKEN": ""})
    assert rc == 0
    assert "Pass --now to proceed" in stdout


def test_destroy_without_now_is_a_no_op(run_cli, raw_config, write_config):
    rc, stdout, _ = run_cli("destroy", "-c", write_config(raw_config))
    assert rc == 0
    assert "Would delete all droplets tagged 'demo'" in stdout


def test_missing_config_exits_nonzero(run_cli, tmp_path):
    rc, stdout, _ = run_cli("deploy", "--now", "-c", str(tmp_path / "missing.json"))
    assert rc == 1
    assert "not found" in stdout


def test_deploy_now_without_token_exits_nonzero(run_cli, raw_config, write_config):
    rc, stdout, _ = run_cli("deploy", "--now", "-c", write_config(raw_config), env={"DIGITALOCEAN_TOKEN": ""})
    assert rc == 1
    assert "DIGITALOCEAN_TOKEN" in stdout


def test_build_without_binary_exits_nonzero(run_cli, raw_config, write_config):
    rc, stdout, _ = run_cli("build", "-c", write_config(raw_config))
    assert rc == 1
    assert "No build binary" in stdout


def test_build_dry_run(run_cli, raw_config, write_config):
    raw_config["godot_binary_path"] = "/opt/godot"
    rc, stdout, _ = run_cli("build", "--dry-run", "-c", write_config(raw_config))
    assert rc == 0
    assert "[dry-run] /opt/godot" in stdout


def test_config_file_is_plain_json(raw_config, write_config):
    path = write_config(raw_config)
    with open(path) as f:
        assert json.load(f)["droplet"]["tag"] == "demo"
