from typing import Any, Dict, List, Tuple

import pytest

from miniscan.config import Config
from miniscan.networks import NetworkRegistry
from miniscan.service import ContractService

PROXY = "0x" + "a" * 40
IMPL = "0x" + "b" * 40
IMPL2 = "0x" + "c" * 40


def ok(result: Any) -> Dict[str, Any]:
    return {"status": "1", "message": "OK", "result": result}


def notok(message: str, result: Any = None) -> Dict[str, Any]:
    return {"status": "0", "message": message, "result": [] if result is None else result}


def source_entry(
    name: str = "Token",
    abi: str = '[{"type":"function","name":"totalSupply"}]',
    proxy: str = "0",
    implementation: str = "",
    source: str = "contract Token {}",
) -> Dict[str, Any]:
    return {
        "ABI": abi,
        "ContractName": name,
        "Implementation": implementation,
        "Proxy": proxy,
        "SourceCode": source,
    }


class FakeExplorerClient:
    """Scripted stand-in for ExplorerClient keyed by (action, address)."""

    def __init__(self) -> None:
        self.responses: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Tuple[str, str, str]] = []

    def add(self, action: str, address: str, response: Any) -> None:
        self.responses[(action, address.lower())] = response

    def _respond(self, network, action: str, address: str) -> Dict[str, Any]:
        self.calls.append((action, address, network.name))
        response = self.responses.get((action, address))
        if response is None:
            raise AssertionError(f"unexpected call {action} {address}")
        if isinstance(response, Exception):
            raise response
        return response

    def get_transactions(self, network, address, action="txlist"):
        return self._respond(network, action, address)

    def get_source_code(self, network, address):
        return self._respond(network, "getsourcecode", address)

    def get_abi(self, network, address):
        return self._respond(network, "getabi", address)


@pytest.fixture
def config() -> Config:
    return Config(registry=NetworkRegistry.from_env({"ETHERSCAN_API_KEY": "test-key"}))


@pytest.fixture
def fake_client() -> FakeExplorerClient:
    return FakeExplorerClient()


@pytest.fixture
def service(config, fake_client) -> ContractService:
    return ContractService(config, client=fake_client)
