import pytest

from miniscan.config import load_config
from miniscan.errors import UnknownNetwork
from miniscan.networks import NETWORK_TABLE, NetworkRegistry


@pytest.fixture
def registry():
    return NetworkRegistry.from_env({"ETHERSCAN_API_KEY": "eth-key", "BSCSCAN_API_KEY": " bsc-key "})


def test_every_network_has_api_host(registry):
    assert len(registry) == len(NETWORK_TABLE)
    for name in registry.names():
        cfg = registry.lookup(name)
        assert cfg.api_host
        assert cfg.api_url == f"https://{cfg.api_host}/api"


def test_lookup_unknown_network_raises(registry):
    with pytest.raises(UnknownNetwork) as excinfo:
        registry.lookup("solana")
    assert "Unknown network 'solana'" in str(excinfo.value)
    assert "ethereum" in str(excinfo.value)


def test_lookup_none_raises(registry):
    with pytest.raises(UnknownNetwork):
        registry.lookup(None)


def test_api_keys_come_from_env(registry):
    assert registry.lookup("ethereum").api_key == "eth-key"
    assert registry.lookup("bsc").api_key == "bsc-key"


def test_missing_api_key_defaults_to_empty(registry):
    assert registry.lookup("polygon").api_key == ""
    assert registry.lookup("gnosis").api_key == ""


@pytest.mark.parametrize(
    "query,expected",
    [
        ("Ethereum", "ethereum"),
        (" eth ", "ethereum"),
        ("mainnet", "ethereum"),
        ("1", "ethereum"),
        ("56", "bsc"),
        ("matic", "polygon"),
        ("42161", "arbitrum"),
        ("xdai", "gnosis"),
    ],
)
def test_lookup_by_alias_and_chain_id(registry, query, expected):
    assert registry.lookup(query).name == expected


def test_gnosis_uses_blockscout_path(registry):
    assert registry.lookup("gnosis").api_url == "https://blockscout.com/xdai/mainnet/api"


def test_contains(registry):
    assert "optimism" in registry
    assert "nope" not in registry


def test_load_config_defaults():
    config = load_config({})
    assert config.request_timeout == 5.0
    assert config.max_retries == 1
    assert config.max_proxy_hops == 3
    assert config.default_network == "ethereum"
    assert config.registry.lookup("ethereum").api_key == ""


def test_load_config_reads_env():
    config = load_config(
        {
            "ETHERSCAN_API_KEY": "k",
            "REQUEST_TIMEOUT": "2.5",
            "REQUEST_RETRIES": "3",
            "MAX_PROXY_HOPS": "1",
            "DEFAULT_NETWORK": "BSC",
            "LOG_LEVEL": "debug",
        }
    )
    assert config.registry.lookup("ethereum").api_key == "k"
    assert config.request_timeout == 2.5
    assert config.max_retries == 3
    assert config.max_proxy_hops == 1
    assert config.default_network == "bsc"
    assert config.log_level == "DEBUG"


def test_load_config_rejects_unknown_default_network():
    with pytest.raises(UnknownNetwork):
        load_config({"DEFAULT_NETWORK": "dogechain"})
