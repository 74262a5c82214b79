#!/usr/bin/env python3

# Exercises the portgen command the way a shell user would, through click's
# test runner.

import json

from click.testing import CliRunner

from portgen import main


def run(*args):
    return CliRunner().invoke(main, list(args))


def test_prints_port():
    result = run("boot-polkadot-00")
    assert result.exit_code == 0
    assert result.output == "31000\n"

    assert run("rpc-asset-hub-kusama-01").output == "32011\n"
    assert run("val-people-westend-01").output == "33044\n"


def test_prints_ip_and_port():
    result = run("--ip", "val-people-westend-01")
    assert result.exit_code == 0
    assert result.output.strip() == "192.168.231.14:33044"


def test_json_output():
    result = run("--json", "val-kilt-polkadot-01")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["port"] == 35244
    assert data["role"] == "validator"
    assert data["chain"] == "kilt"
    assert data["network"] == "polkadot"
    assert data["instance"] == 1
    assert data["address"] == data["ip"] + ":35244"


def test_reverse():
    result = run("--reverse", "32011")
    assert result.exit_code == 0
    assert result.output.strip() == "rpc-asset-hub-kusama-01"


def test_reverse_rejects_bad_port():
    for port in ("37000", "not-a-port"):
        result = run("-r", port)
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "InvalidPort" in result.stderr


def test_malformed_name_fails():
    """Test that too few tokens fails on stderr without printing a port"""
    result = run("foo")
    assert result.exit_code != 0
    assert result.stdout == ""
    assert "MalformedName" in result.stderr
    assert "{role}-[chain-]{network}-{instance}" in result.stderr


def test_unknown_chain_fails():
    result = run("rpc-nonexistent-polkadot-01")
    assert result.exit_code != 0
    assert result.stdout == ""
    assert "UnknownChain" in result.stderr
    assert "nonexistent" in result.stderr


def test_verbose():
    result = run("-v", "rpc-polkadot-1")
    assert result.exit_code == 0
    assert "role=rpc chain=relay network=polkadot instance=1" in result.stderr
    assert result.stdout == "31001\n"


def test_missing_argument_is_usage_error():
    assert run().exit_code == 2
