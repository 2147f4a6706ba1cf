"""
HTTP API for contract lookups.

Lookup failures (unknown network, explorer errors, timeouts) are answered with
HTTP 200 and an error payload. Anything unexpected is logged with its
traceback and answered with HTTP 500 and a generic "unknown error" message.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import Config, load_config
from .models import CodeKind
from .service import ContractService
from .source import format_abi

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "unknown error"

router = APIRouter(prefix="/api", tags=["contracts"])


def get_service(request: Request) -> ContractService:
    return request.app.state.service


def _log_unhandled(request: Request, exc: Exception) -> None:
    kind = type(exc).__name__
    logger.error(
        "Unhandled %s on %s: %s",
        kind,
        request.url.path,
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"error_kind": kind, "path": request.url.path},
    )


def _error(message: str) -> Dict[str, Any]:
    return {"error": {"msg": message}}


def _unknown_error(request: Request, exc: Exception, **extra: Any) -> JSONResponse:
    _log_unhandled(request, exc)
    return JSONResponse(status_code=500, content={**extra, **_error(UNKNOWN_ERROR)})


@router.get("/startblock")
def get_start_block(
    request: Request,
    address: str = Query("", description="Contract address (0x-prefixed)"),
    network: Optional[str] = Query(None, description="Network name or chain id"),
    service: ContractService = Depends(get_service),
):
    """Block number of the contract's first transaction."""
    try:
        result = service.get_start_block(address, network)
    except Exception as exc:  # pylint: disable=broad-except
        return _unknown_error(request, exc, data={"blockNumber": 0})

    if not result.is_ok:
        return {"data": {"blockNumber": 0}, **_error(result.error)}
    # Explorers report block numbers as decimal strings; keep that on the wire.
    return {"data": {"blockNumber": str(result.data)}}


@router.get("/code", response_class=PlainTextResponse)
def get_code(
    request: Request,
    address: str = Query("", description="Contract address (0x-prefixed)"),
    network: Optional[str] = Query(None, description="Network name or chain id"),
    code_type: CodeKind = Query(CodeKind.SOURCE_CODE, alias="codeType"),
    service: ContractService = Depends(get_service),
):
    """ABI or source of the contract (proxies resolved), as plain text."""
    try:
        result = service.get_code(address, network, code_type)
    except Exception as exc:  # pylint: disable=broad-except
        return _unknown_error(request, exc)
    if not result.is_ok:
        return PlainTextResponse(result.error)

    code = result.data.code
    if code_type is CodeKind.ABI:
        code = format_abi(code)
    return PlainTextResponse(code)


@router.get("/contract")
def get_contract(
    request: Request,
    address: str = Query("", description="Contract address (0x-prefixed)"),
    network: Optional[str] = Query(None, description="Network name or chain id"),
    service: ContractService = Depends(get_service),
):
    try:
        return service.get_contract(address, network).to_dict()
    except Exception as exc:  # pylint: disable=broad-except
        return _unknown_error(request, exc)


@router.get("/abi")
def get_abi(
    request: Request,
    address: str = Query("", description="Contract address (0x-prefixed)"),
    network: Optional[str] = Query(None, description="Network name or chain id"),
    service: ContractService = Depends(get_service),
):
    try:
        result = service.get_abi(address, network)
    except Exception as exc:  # pylint: disable=broad-except
        return _unknown_error(request, exc)
    if not result.is_ok:
        return _error(result.error)
    return PlainTextResponse(result.data)


@router.get("/sourcecode")
def get_source_code(
    request: Request,
    address: str = Query("", description="Contract address (0x-prefixed)"),
    network: Optional[str] = Query(None, description="Network name or chain id"),
    service: ContractService = Depends(get_service),
):
    try:
        result = service.get_source_code(address, network)
    except Exception as exc:  # pylint: disable=broad-except
        return _unknown_error(request, exc)
    if not result.is_ok:
        return _error(result.error)
    return PlainTextResponse(result.data)


@router.get("/networks")
def list_networks(service: ContractService = Depends(get_service)):
    return service.list_networks()


# Fallback for errors raised outside the routes (e.g. in dependencies). Starlette
# re-raises these after responding, so the server logs them a second time.
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _log_unhandled(request, exc)
    return JSONResponse(status_code=500, content=_error(UNKNOWN_ERROR))


def create_app(
    config: Optional[Config] = None,
    service: Optional[ContractService] = None,
) -> FastAPI:
    if service is None:
        service = ContractService(config or load_config())

    app = FastAPI(
        title="miniscan",
        description="Look up a contract's start block, ABI and source across Etherscan-family explorers.",
    )
    app.state.service = service
    app.include_router(router)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app
