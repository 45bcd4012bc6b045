"""FastAPI application for the quote service.

The service is stateless: callers post the pool, tick array and oracle
snapshots they fetched, and get quotes and instruction account lists back.
"""

import os

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from clmm_quote.api.endpoints import get_config, router
from clmm_quote.config import QuoteConfig

# Bind address of the quote server
HOST = os.environ.get("CLMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("CLMM_PORT", "8000"))
DEBUG = os.environ.get("CLMM_DEBUG", "false").lower() in ("true", "1", "yes")

# Two hops with three full tick arrays each are a few hundred KB of JSON
MAX_REQUEST_SIZE = 10 * 1024 * 1024

app = FastAPI(
    title="CLMM Quote",
    description="Swap quotes for concentrated liquidity pools",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Refuse snapshot bodies above MAX_REQUEST_SIZE before they are parsed."""
    content_length = request.headers.get("content-length")
    if content_length:
        if not content_length.isdigit():
            return JSONResponse(status_code=400, content={"detail": "Invalid content-length"})
        if int(content_length) > MAX_REQUEST_SIZE:
            return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health(config: QuoteConfig = Depends(get_config)) -> dict[str, object]:
    """Liveness check reporting the program the service derives addresses for."""
    return {
        "status": "ok",
        "programId": config.program_id,
        "protocolVersion": config.protocol_version.value,
    }


def run() -> None:
    """Serve the quote API with uvicorn.

    CLMM_HOST and CLMM_PORT set the bind address (default 0.0.0.0:8000);
    CLMM_DEBUG=true turns on auto-reload. Quote settings are read per
    request by QuoteConfig.from_env.
    """
    uvicorn.run(
        "clmm_quote.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
