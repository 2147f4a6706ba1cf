from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import UnknownNetwork

_SPACE_RE = re.compile(r"[\s_\-]+")

# name -> (chain id, explorer site, API host, API key env var)
NETWORK_TABLE: Tuple[Tuple[str, str, str, str, Optional[str]], ...] = (
    ("ethereum", "1", "etherscan.io", "api.etherscan.io", "ETHERSCAN_API_KEY"),
    ("bsc", "56", "bscscan.com", "api.bscscan.com", "BSCSCAN_API_KEY"),
    ("avalanche", "43114", "snowtrace.io", "api.snowtrace.io", "SNOWTRACE_API_KEY"),
    ("fantom", "250", "ftmscan.com", "api.ftmscan.com", "FTMSCAN_API_KEY"),
    ("arbitrum", "42161", "arbiscan.io", "api.arbiscan.io", "ARBISCAN_API_KEY"),
    ("polygon", "137", "polygonscan.com", "api.polygonscan.com", "POLYGONSCAN_API_KEY"),
    ("aurora", "1313161554", "aurorascan.dev", "api.aurorascan.dev", "AURORASCAN_API_KEY"),
    (
        "optimism",
        "10",
        "optimistic.etherscan.io",
        "api-optimistic.etherscan.io",
        "OPTIMISTIC_ETHERSCAN_API_KEY",
    ),
    ("celo", "42220", "celoscan.xyz", "api.celoscan.xyz", "CELOSCAN_API_KEY"),
    # Blockscout, no key needed.
    ("gnosis", "100", "blockscout.com/xdai/mainnet", "blockscout.com/xdai/mainnet", None),
    ("hsc", "70", "hooscan.com", "api.hooscan.com", "HOOSCAN_API_KEY"),
    (
        "moonriver",
        "1285",
        "moonriver.moonscan.io",
        "api-moonriver.moonscan.io",
        "MOONRIVER_MOONSCAN_API_KEY",
    ),
    (
        "moonbeam",
        "1284",
        "moonbeam.moonscan.io",
        "api-moonbeam.moonscan.io",
        "MOONBEAM_MOONSCAN_API_KEY",
    ),
    ("cronos", "25", "cronoscan.com", "api.cronoscan.com", "CRONOSCAN_API_KEY"),
)

ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "eth": "ethereum",
        "mainnet": "ethereum",
        "ethereum mainnet": "ethereum",
        "bnb": "bsc",
        "binance": "bsc",
        "avax": "avalanche",
        "ftm": "fantom",
        "arb": "arbitrum",
        "arbitrum one": "arbitrum",
        "matic": "polygon",
        "op": "optimism",
        "xdai": "gnosis",
        "hoo": "hsc",
        "cro": "cronos",
    }
)


def _norm(text: str) -> str:
    return _SPACE_RE.sub(" ", (text or "").strip().lower())


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    chain_id: str
    scan_host: str
    api_host: str
    api_key: str = ""

    @property
    def api_url(self) -> str:
        return f"https://{self.api_host}/api"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.name,
            "chain_id": self.chain_id,
            "explorer": f"https://{self.scan_host}",
            "api_url": self.api_url,
            "has_api_key": bool(self.api_key),
        }


class NetworkRegistry:
    """
    Read-only registry of the supported explorer networks.
    - Built once at startup (usually from environment) and passed to whoever needs it.
    - Resolves a network by name, alias or numeric chain id.
    """

    def __init__(self, networks: Mapping[str, NetworkConfig]) -> None:
        self._networks: Mapping[str, NetworkConfig] = MappingProxyType(dict(networks))
        self._by_chain_id: Mapping[str, str] = MappingProxyType(
            {cfg.chain_id: name for name, cfg in self._networks.items()}
        )

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "NetworkRegistry":
        networks: Dict[str, NetworkConfig] = {}
        for name, chain_id, scan_host, api_host, key_var in NETWORK_TABLE:
            api_key = (env.get(key_var) or "").strip() if key_var else ""
            networks[name] = NetworkConfig(
                name=name,
                chain_id=chain_id,
                scan_host=scan_host,
                api_host=api_host,
                api_key=api_key,
            )
        return cls(networks)

    def names(self) -> List[str]:
        return list(self._networks)

    def list_networks(self) -> List[Dict[str, Any]]:
        return [cfg.to_dict() for cfg in self._networks.values()]

    def lookup(self, network: Optional[str]) -> NetworkConfig:
        q = _norm(str(network) if network is not None else "")
        if q.isdigit():
            q = self._by_chain_id.get(q, q)
        q = ALIASES.get(q, q)

        cfg = self._networks.get(q)
        if cfg is None:
            raise UnknownNetwork(str(network), ", ".join(self.names()))
        return cfg

    def __contains__(self, network: object) -> bool:
        try:
            self.lookup(str(network))
        except UnknownNetwork:
            return False
        return True

    def __len__(self) -> int:
        return len(self._networks)
