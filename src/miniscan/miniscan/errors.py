class MiniscanError(Exception):
    """Base class for expected lookup failures."""


class UnknownNetwork(MiniscanError, ValueError):
    def __init__(self, network: str, supported: str = "") -> None:
        self.network = network
        message = f"Unknown network '{network}'."
        if supported:
            message += f" Supported: {supported}."
        super().__init__(message)


class InvalidAddress(MiniscanError, ValueError):
    pass


class TransportError(MiniscanError):
    """Explorer could not be reached or did not answer with a JSON object."""


class ProxyCycleError(MiniscanError):
    def __init__(self, chain: list, reason: str) -> None:
        self.chain = list(chain)
        super().__init__(f"{reason}: {' -> '.join(self.chain)}.")
