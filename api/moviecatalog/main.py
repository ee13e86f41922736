"""FastAPI application entrypoint, error mapping, and health reporting.

Invariants:
- Every catalog failure maps to exactly one status code and error kind.
- Provider telemetry is only exposed to allowlisted hosts.
"""

import ipaddress
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from moviecatalog.api.router import api_router
from moviecatalog.core.config import settings
from moviecatalog.core.errors import CatalogError
from moviecatalog.db.base import Base
from moviecatalog.db.session import engine
from moviecatalog.ingestion.observability import provider_monitor

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

logger = logging.getLogger("moviecatalog.main")

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


def configure_logging() -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, force=True)


@app.on_event("startup")
async def _startup() -> None:
    """Configure logging and make sure the catalog tables exist."""
    configure_logging()
    if engine.dialect.name == "sqlite":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started (%s)", settings.app_name, settings.environment)


@app.exception_handler(CatalogError)
async def _catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate catalog errors into HTTP responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "error": exc.kind})


def _summarize_providers(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Condense provider metrics into health-friendly telemetry."""
    issues: list[dict[str, Any]] = []
    sources: dict[str, Any] = {}
    for source, payload in snapshot.items():
        operations = payload.get("operations", {})
        state = "ok"
        failure_total = 0
        degraded_total = 0
        for operation, metrics in operations.items():
            failure_total += int(metrics.get("failed") or 0)
            degraded_total += int(metrics.get("degraded") or 0)
            last_error = metrics.get("last_error")
            if last_error:
                issues.append({"source": source, "operation": operation, "reason": "last_error", "error": last_error})
                state = "degraded"
        sources[source] = {
            "state": state,
            "operations": operations,
            "failure_total": failure_total,
            "degraded_total": degraded_total,
        }
    return {"sources": sources, "issues": issues}


def _entry_matches(entry: str, candidate: str) -> bool:
    """Return True if an allowlist entry matches a candidate host/IP."""
    try:
        network = ipaddress.ip_network(entry, strict=False)
        return ipaddress.ip_address(candidate) in network
    except ValueError:
        return entry.casefold() == candidate.casefold()


def _ip_or_host_allowlisted(request: Request) -> bool:
    """Check request client/host headers against the health allowlist."""
    if not settings.health_allowlist:
        return False
    client_candidates: list[str] = []
    if request.client and request.client.host:
        client_candidates.append(request.client.host)
    host_header = request.headers.get("host")
    if host_header:
        client_candidates.append(host_header.split(":")[0])
    for candidate in client_candidates:
        for entry in settings.health_allowlist:
            if entry and _entry_matches(entry, candidate):
                return True
    return False


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health(request: Request) -> dict[str, Any]:
    """Return health status and, for allowlisted hosts, provider telemetry."""
    if not _ip_or_host_allowlisted(request):
        return {"status": "ok"}

    snapshot = await provider_monitor.snapshot()
    telemetry = _summarize_providers(snapshot)
    status = "ok" if not telemetry["issues"] else "degraded"
    return {"status": status, "providers": telemetry}
