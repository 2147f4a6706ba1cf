import logging
import time
from typing import Any, Dict, Optional

import requests

from .errors import TransportError
from .models import Result
from .networks import NetworkConfig

logger = logging.getLogger(__name__)

MAX_BLOCK = 99999999


class ExplorerClient:
    """Thin wrapper around Etherscan-family explorer APIs; one host per network."""

    def __init__(
        self,
        timeout: float = 5.0,
        max_retries: int = 1,
        backoff_seconds: float = 0.5,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max(1, int(max_retries))
        self.backoff_seconds = backoff_seconds
        self.session = session or requests.Session()

    def get_transactions(self, network: NetworkConfig, address: str, action: str = "txlist") -> Dict[str, Any]:
        """First transaction (ascending) of ``address``; action is txlist or txlistinternal."""
        params = {
            "module": "account",
            "action": action,
            "address": address,
            "startblock": 0,
            "endblock": MAX_BLOCK,
            "page": 1,
            "offset": 1,
            "sort": "asc",
        }
        return self.request(network, params)

    def get_source_code(self, network: NetworkConfig, address: str) -> Dict[str, Any]:
        params = {
            "module": "contract",
            "action": "getsourcecode",
            "address": address,
        }
        return self.request(network, params)

    def get_abi(self, network: NetworkConfig, address: str) -> Dict[str, Any]:
        params = {
            "module": "contract",
            "action": "getabi",
            "address": address,
        }
        return self.request(network, params)

    def _is_rate_limit_payload(self, payload: Any) -> bool:
        if not isinstance(payload, dict):
            return False

        candidates: list[str] = []
        for key in ("message", "result"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                candidates.append(value)

        haystack = " ".join(candidates).lower()
        if not haystack:
            return False

        return (
            "rate limit" in haystack
            or "max calls per sec" in haystack
            or "max calls per second" in haystack
            or "too many requests" in haystack
        )

    def request(self, network: NetworkConfig, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET ``network.api_url`` and return the JSON envelope as-is.

        The envelope's ``status`` is not interpreted here; see ``envelope_result``.
        Raises TransportError when the explorer cannot be reached or does not
        answer with a JSON object.
        """
        merged = {**params, "apikey": network.api_key}
        url = network.api_url
        action = params.get("action")

        for attempt in range(1, self.max_retries + 1):
            logger.debug("GET %s action=%s attempt=%d", url, action, attempt)
            error: Optional[TransportError] = None
            cause: Optional[Exception] = None
            try:
                response = self.session.get(url, params=merged, timeout=self.timeout)
                if response.status_code >= 500 and attempt < self.max_retries:
                    time.sleep(self.backoff_seconds * attempt)
                    continue

                response.raise_for_status()
                payload = response.json()
            except requests.Timeout as exc:
                error = TransportError(f"Request to {network.api_host} timed out after {self.timeout:g}s.")
                cause = exc
            except requests.exceptions.JSONDecodeError as exc:
                error = TransportError(f"Failed to parse response from {network.api_host}.")
                cause = exc
            except requests.HTTPError as exc:
                # requests puts the full URL, apikey included, into its messages.
                status = exc.response.status_code if exc.response is not None else "error"
                error = TransportError(f"Request to {network.api_host} failed (HTTP {status}).")
                cause = exc
            except requests.RequestException as exc:
                error = TransportError(f"Request to {network.api_host} failed ({type(exc).__name__}).")
                cause = exc
            except ValueError as exc:
                error = TransportError(f"Failed to parse response from {network.api_host}.")
                cause = exc

            if error is not None:
                if attempt < self.max_retries:
                    time.sleep(self.backoff_seconds * attempt)
                    continue
                raise error from cause

            if not isinstance(payload, dict):
                raise TransportError(f"Unexpected response from {network.api_host} (non-object).")
            if self._is_rate_limit_payload(payload) and attempt < self.max_retries:
                time.sleep(self.backoff_seconds * attempt)
                continue
            return payload

        raise RuntimeError("Request failed without raising an exception.")


def envelope_result(payload: Dict[str, Any]) -> Result[Any]:
    """Interpret an explorer envelope: status "1" is success, anything else a domain error."""
    status = str(payload.get("status", "")).strip()
    message = payload.get("message", "")
    result = payload.get("result")

    if status == "1":
        if result is None:
            return Result.fail("Unexpected response from explorer (missing result).")
        return Result.ok(result)

    # status=0 carries the human-readable reason in `message`, with details such
    # as "Invalid API Key" sometimes in a string `result`.
    detail = result if isinstance(result, str) else ""
    if message == "NOTOK" and detail:
        return Result.fail(detail)
    return Result.fail(message or detail or "unknown error")
