import argparse
import json
import sys
from typing import Optional

from .config import load_config
from .logger import setup_logging
from .models import CodeKind
from .service import ContractService


def _add_lookup_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--address",
        required=True,
        help="Contract address (0x-prefixed).",
    )
    parser.add_argument(
        "--network",
        required=False,
        help="Network name or chain id. Defaults to DEFAULT_NETWORK env or ethereum.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Look up contract start blocks, ABIs and source code on Etherscan-family explorers.",
        allow_abbrev=False,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    start_parser = subparsers.add_parser("startblock", help="Block of the contract's first transaction")
    _add_lookup_args(start_parser)

    code_parser = subparsers.add_parser("code", help="ABI or source code, following proxies")
    _add_lookup_args(code_parser)
    code_parser.add_argument(
        "--code-type",
        choices=[kind.value for kind in CodeKind],
        default=CodeKind.SOURCE_CODE.value,
        help="Which artifact to fetch. Defaults to SourceCode.",
    )

    contract_parser = subparsers.add_parser("contract", help="Contract name, start block and ABI")
    _add_lookup_args(contract_parser)

    abi_parser = subparsers.add_parser("abi", help="Formatted ABI of exactly this address")
    _add_lookup_args(abi_parser)

    source_parser = subparsers.add_parser("sourcecode", help="Flattened source of exactly this address")
    _add_lookup_args(source_parser)

    subparsers.add_parser("networks", help="List supported networks")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind host.")
    serve_parser.add_argument("--port", type=int, default=3000, help="Bind port.")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config()
        setup_logging(config.log_level)

        if args.command == "serve":
            import uvicorn

            from .web import create_app

            uvicorn.run(create_app(config), host=args.host, port=args.port)
            return

        service = ContractService(config)

        if args.command == "networks":
            print(json.dumps(service.list_networks(), indent=2))
            return

        if args.command == "startblock":
            result = service.get_start_block(args.address, args.network)
        elif args.command == "code":
            result = service.get_code(args.address, args.network, CodeKind(args.code_type))
        elif args.command == "contract":
            result = service.get_contract(args.address, args.network)
        elif args.command == "abi":
            result = service.get_abi(args.address, args.network)
        else:
            result = service.get_source_code(args.address, args.network)

        print(json.dumps(result.to_dict(), indent=2))
        if not result.is_ok:
            sys.exit(1)
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
