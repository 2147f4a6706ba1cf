"""
MCP server exposing the contract lookups as tools.
"""

import argparse
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import load_config
from .logger import setup_logging
from .models import CodeKind
from .service import ContractService


def build_server(service: ContractService) -> FastMCP:
    server = FastMCP(
        name="miniscan",
        instructions="Look up a contract's start block, ABI and source code on Etherscan-family explorers.",
    )

    @server.tool(
        name="get_start_block",
        title="Get Contract Start Block",
        description="Block number of the contract's first transaction (falls back to internal transactions).",
    )
    def get_start_block(address: str, network: Optional[str] = None) -> dict:
        return service.get_start_block(address, network).to_dict()

    @server.tool(
        name="get_contract_code",
        title="Get Contract Code",
        description="ABI or source code of a contract, following proxies to their implementation. code_type: ABI|SourceCode.",
    )
    def get_contract_code(address: str, network: Optional[str] = None, code_type: str = "SourceCode") -> dict:
        try:
            kind = CodeKind(code_type)
        except ValueError:
            return {"error": {"message": "code_type must be one of: ABI, SourceCode."}}
        return service.get_code(address, network, kind).to_dict()

    @server.tool(
        name="get_contract",
        title="Get Contract Summary",
        description="Contract name, start block and ABI in one call.",
    )
    def get_contract(address: str, network: Optional[str] = None) -> dict:
        return service.get_contract(address, network).to_dict()

    @server.tool(
        name="get_abi",
        title="Get ABI",
        description="Formatted ABI of exactly this address (proxies are not followed).",
    )
    def get_abi(address: str, network: Optional[str] = None) -> dict:
        return service.get_abi(address, network).to_dict()

    @server.tool(
        name="get_source_code",
        title="Get Source Code",
        description="Flattened source code of exactly this address (proxies are not followed).",
    )
    def get_source_code(address: str, network: Optional[str] = None) -> dict:
        return service.get_source_code(address, network).to_dict()

    @server.tool(
        name="list_networks",
        title="List Networks",
        description="Supported networks with their explorer hosts and chain ids.",
    )
    def list_networks() -> dict:
        return {"networks": service.list_networks()}

    return server


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the miniscan MCP server.")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Transport protocol for MCP.",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--mount-path",
        default="/",
        help="Mount path for SSE transport (only when transport=sse).",
    )
    args = parser.parse_args()

    config = load_config()
    setup_logging(config.log_level)
    server = build_server(ContractService(config))

    # FastMCP uses host/port only for SSE/HTTP transports; stdio ignores them.
    server.settings.host = args.host
    server.settings.port = args.port

    if args.transport == "sse":
        server.run(transport="sse", mount_path=args.mount_path)
    else:
        server.run(transport=args.transport)


if __name__ == "__main__":
    main()
