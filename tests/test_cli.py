import json
from unittest import mock

import pytest
from conftest import PROXY, notok, ok, source_entry

from miniscan import cli


@pytest.fixture
def patched(service, monkeypatch):
    monkeypatch.setattr(cli, "load_config", lambda: service.config)
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    with mock.patch.object(cli, "ContractService", return_value=service):
        yield


def test_startblock_prints_result(patched, fake_client, capsys):
    fake_client.add("txlist", PROXY, ok([{"blockNumber": "42"}]))

    cli.main(["startblock", "--address", PROXY])

    assert json.loads(capsys.readouterr().out) == {"data": 42}


def test_code_abi(patched, fake_client, capsys):
    fake_client.add("getsourcecode", PROXY, ok([source_entry(name="T", abi="[]")]))

    cli.main(["code", "--address", PROXY, "--network", "ethereum", "--code-type", "ABI"])

    assert json.loads(capsys.readouterr().out) == {"data": {"contractName": "T", "code": "[]"}}


def test_failure_exits_non_zero(patched, fake_client, capsys):
    fake_client.add("txlist", PROXY, notok("NOTOK", "Invalid API Key"))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["contract", "--address", PROXY])

    assert excinfo.value.code == 1
    assert json.loads(capsys.readouterr().out) == {"error": {"message": "Invalid API Key"}}


def test_networks(patched, capsys):
    cli.main(["networks"])
    assert json.loads(capsys.readouterr().out)[0]["network"] == "ethereum"
