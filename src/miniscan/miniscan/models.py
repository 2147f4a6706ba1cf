from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class CodeKind(str, Enum):
    ABI = "ABI"
    SOURCE_CODE = "SourceCode"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either ``data`` or ``error`` (a message), never both."""

    data: Optional[T] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.error is None) == (self.data is None):
            raise ValueError("Result needs exactly one of data or error.")

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        return cls(data=data)

    @classmethod
    def fail(cls, message: str) -> "Result[T]":
        return cls(error=message or "unknown error")

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": {"message": self.error}}
        data = self.data
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        return {"data": data}


@dataclass(frozen=True)
class ContractSourceRecord:
    abi: str
    contract_name: str
    implementation_address: str
    proxy_flag: str
    source_code: str

    @classmethod
    def from_entry(cls, entry: Dict[str, Any]) -> "ContractSourceRecord":
        return cls(
            abi=str(entry.get("ABI") or ""),
            contract_name=str(entry.get("ContractName") or ""),
            implementation_address=str(entry.get("Implementation") or "").strip(),
            proxy_flag=str(entry.get("Proxy", "0")).strip() or "0",
            source_code=str(entry.get("SourceCode") or ""),
        )

    def is_direct(self, address: str) -> bool:
        # Some explorers report a contract as its own implementation
        # (e.g. Uniswap V3 Position NFT on Ethereum).
        if self.proxy_flag == "0" or not self.implementation_address:
            return True
        return self.implementation_address.lower() == address.lower()


@dataclass(frozen=True)
class ContractCode:
    contract_name: str
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return {"contractName": self.contract_name, "code": self.code}


@dataclass(frozen=True)
class ContractSummary:
    contract_name: str
    start_block: int
    abi: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contractName": self.contract_name,
            "startBlock": self.start_block,
            "abi": self.abi,
        }
