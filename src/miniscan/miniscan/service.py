import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from .config import Config
from .errors import InvalidAddress, MiniscanError, ProxyCycleError, TransportError
from .explorer_client import ExplorerClient, envelope_result
from .models import CodeKind, ContractCode, ContractSourceRecord, ContractSummary, Result
from .networks import NetworkConfig
from .source import format_abi, normalize_source

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
NO_TRANSACTIONS = "No transactions found"


class ContractService:
    """Combine network configuration and the explorer client to serve contract lookups."""

    def __init__(self, config: Config, client: Optional[ExplorerClient] = None) -> None:
        self.config = config
        self.registry = config.registry
        self.client = client or ExplorerClient(
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            backoff_seconds=config.backoff_seconds,
        )

    def get_start_block(self, address: str, network: Optional[str] = None) -> Result[int]:
        """Block of the contract's first transaction, falling back to internal transactions."""
        try:
            normalized_address, network_cfg = self._prepare_context(address, network)
            result = self._first_block(normalized_address, network_cfg, "txlist")
            if result.error == NO_TRANSACTIONS:
                # Contracts only ever reached through internal calls (e.g. some
                # CREATE2 factories) have no external transactions.
                logger.debug("No external transactions for %s, trying txlistinternal", normalized_address)
                result = self._first_block(normalized_address, network_cfg, "txlistinternal")
            return result
        except TransportError as exc:
            logger.warning("Start block lookup for %s on %s failed: %s", address, network, exc)
            return Result.fail(str(exc))
        except MiniscanError as exc:
            return Result.fail(str(exc))

    def get_code(
        self,
        address: str,
        network: Optional[str] = None,
        kind: CodeKind = CodeKind.SOURCE_CODE,
    ) -> Result[ContractCode]:
        """ABI or normalized source of a contract, following proxies to their implementation."""
        kind = CodeKind(kind)
        try:
            normalized_address, network_cfg = self._prepare_context(address, network)
            record, resolved = self._resolve_implementation(normalized_address, network_cfg)
        except TransportError as exc:
            logger.warning("Code lookup for %s on %s failed: %s", address, network, exc)
            return Result.fail(str(exc))
        except MiniscanError as exc:
            return Result.fail(str(exc))
        if isinstance(record, Result):
            return record

        if resolved != normalized_address:
            logger.debug("Resolved proxy %s to implementation %s", normalized_address, resolved)

        if kind is CodeKind.ABI:
            code = record.abi
        else:
            code = normalize_source(record.source_code)
        return Result.ok(ContractCode(contract_name=record.contract_name, code=code))

    def get_contract(self, address: str, network: Optional[str] = None) -> Result[ContractSummary]:
        """Name, start block and ABI in one record; the start block error wins if both fail."""
        start = self.get_start_block(address, network)
        if not start.is_ok:
            return Result.fail(start.error)

        abi = self.get_code(address, network, CodeKind.ABI)
        if not abi.is_ok:
            return Result.fail(abi.error)

        return Result.ok(
            ContractSummary(
                contract_name=abi.data.contract_name,
                start_block=start.data,
                abi=abi.data.code,
            )
        )

    def get_abi(self, address: str, network: Optional[str] = None) -> Result[str]:
        """Formatted ABI of exactly this address (no proxy following)."""
        try:
            normalized_address, network_cfg = self._prepare_context(address, network)
            payload = self.client.get_abi(network_cfg, normalized_address)
        except TransportError as exc:
            logger.warning("ABI lookup for %s on %s failed: %s", address, network, exc)
            return Result.fail(str(exc))
        except MiniscanError as exc:
            return Result.fail(str(exc))

        result = envelope_result(payload)
        if not result.is_ok:
            return result
        return Result.ok(format_abi(str(result.data)))

    def get_source_code(self, address: str, network: Optional[str] = None) -> Result[str]:
        """Normalized source of exactly this address (no proxy following)."""
        try:
            normalized_address, network_cfg = self._prepare_context(address, network)
            payload = self.client.get_source_code(network_cfg, normalized_address)
        except TransportError as exc:
            logger.warning("Source lookup for %s on %s failed: %s", address, network, exc)
            return Result.fail(str(exc))
        except MiniscanError as exc:
            return Result.fail(str(exc))

        record = self._source_record(payload)
        if isinstance(record, Result):
            return record
        return Result.ok(normalize_source(record.source_code))

    def list_networks(self) -> List[Dict[str, Any]]:
        return self.registry.list_networks()

    def _first_block(self, address: str, network: NetworkConfig, action: str) -> Result[int]:
        payload = self.client.get_transactions(network, address, action)
        result = envelope_result(payload)
        if not result.is_ok:
            return result

        txs = result.data
        if not isinstance(txs, list) or not txs or not isinstance(txs[0], dict):
            return Result.fail("Unexpected response from explorer (no transactions).")
        raw = str(txs[0].get("blockNumber", "")).strip()
        try:
            return Result.ok(int(raw, 16) if raw.lower().startswith("0x") else int(raw))
        except ValueError:
            return Result.fail(f"Unexpected block number {txs[0].get('blockNumber')!r}.")

    def _resolve_implementation(
        self, address: str, network: NetworkConfig
    ) -> Tuple[Any, str]:
        """
        Walk proxy -> implementation until a direct contract is reached.

        Returns (record, address) or (failed Result, address). Raises
        ProxyCycleError when an address repeats or the hop limit is exceeded.
        """
        chain = [address]
        current = address
        while True:
            payload = self.client.get_source_code(network, current)
            record = self._source_record(payload)
            if isinstance(record, Result) or record.is_direct(current):
                return record, current

            target = self._normalize_address(record.implementation_address)
            if target in chain:
                raise ProxyCycleError(chain + [target], "Proxy cycle detected")
            if len(chain) > self.config.max_proxy_hops:
                raise ProxyCycleError(
                    chain + [target],
                    f"Proxy chain exceeds {self.config.max_proxy_hops} hops",
                )
            chain.append(target)
            current = target

    def _source_record(self, payload: Dict[str, Any]):
        result = envelope_result(payload)
        if not result.is_ok:
            return result

        entries = result.data
        if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
            return Result.fail("Unexpected response from explorer (no source record).")
        return ContractSourceRecord.from_entry(entries[0])

    def _prepare_context(self, address: str, network: Optional[str]) -> Tuple[str, NetworkConfig]:
        network_cfg = self.registry.lookup(network or self.config.default_network)
        return self._normalize_address(address), network_cfg

    def _normalize_address(self, address: str) -> str:
        if not isinstance(address, str):
            raise InvalidAddress("Address must be a string.")

        candidate = address.strip()
        if not candidate.startswith("0x"):
            candidate = f"0x{candidate}"

        if not ADDRESS_PATTERN.match(candidate):
            raise InvalidAddress("Invalid address format. Expected 0x-prefixed 40 hex characters.")

        return candidate.lower()
