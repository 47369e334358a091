"""
FastAPI application factory for the Canada fiscal badge API.

Usage:
    python -m api.app                          # Dev server on port 3000
    APP_LOG_FORMAT=json python -m api.app      # Structured logs

OpenAPI docs available at http://localhost:3000/docs after starting.

Endpoints:
    GET /national-debt, /deficit, /interest, /procurement, /payroll
    GET /badge          themed HTML fragment for the widget
    GET /health         liveness + table cache statistics
    GET /               demo page
    /static/*           embeddable widget script
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from api import dependencies
from api.models import HealthOut
from api.routes import badge as badge_routes
from api.routes import metrics
from opendata.errors import FiscalDataError
from opendata.tables import TableExtractor
from resolver.registry import MetricSpec
from utils.config import AppConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("fiscal_badge_api")

# Mapped to 500 {"error": ...} with CORS headers and a request log line
HANDLED_ERRORS = (FiscalDataError, ValueError, LookupError, OSError, RuntimeError)


def configure_logging(log_format: str = "text") -> None:
    """Install one stream handler on the root logger."""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler], level=logging.INFO, force=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the upstream HTTP session on shutdown."""
    yield
    dependencies.shutdown()


def create_app(config: AppConfig | None = None,
               extractor: TableExtractor | None = None,
               registry: dict[str, MetricSpec] | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Override the environment configuration (useful for testing).
        extractor: Override the table extractor (useful for testing).
        registry: Override the metric registry.

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or _cfg
    configure_logging(cfg.log_format)
    dependencies.configure(cfg, extractor=extractor, registry=registry)

    app = FastAPI(
        title="Canada Fiscal Badge API",
        summary="Headline federal fiscal figures from the Fiscal Monitor data tables.",
        description=(
            "## Canada Fiscal Badge API\n\n"
            "Republishes figures from the Government of Canada *Fiscal Monitor* "
            "data tables on open.canada.ca.\n\n"
            "- **Values** are magnitudes in **dollars** (tables are in millions; "
            "signs are dropped).\n"
            "- **asOf** is the reporting period label copied from the table header.\n"
            "- Failures return `500 {\"error\": message}`; nothing is retried.\n"
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        license_info={
            "name": "Open Government Licence - Canada",
            "url": "https://open.canada.ca/en/open-government-licence-canada",
        },
        openapi_tags=[
            {"name": "metrics", "description": "Fiscal figures as `{asOf, value}`."},
            {"name": "badge", "description": "Rendered badge fragment and demo page."},
            {"name": "meta", "description": "Health check."},
        ],
    )

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with its duration and tag it with a request ID."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, request.url.path, response.status_code,
                duration_ms, request_id,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    async def pipeline_error_handler(request: Request, exc: Exception):
        """Known failures: handled inside the CORS and request-logging middleware."""
        if isinstance(exc, FiscalDataError):
            _logger.error("%s failed: %s: %s", request.url.path, type(exc).__name__, exc)
        else:
            _logger.exception("%s failed", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    for exc_class in HANDLED_ERRORS:
        app.add_exception_handler(exc_class, pipeline_error_handler)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Last resort; Starlette runs this outside every middleware."""
        _logger.exception("%s failed", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check", response_model=HealthOut)
    def health() -> HealthOut:
        """Return 200 OK if the API is running; does not touch the portal."""
        return HealthOut(
            status="ok",
            package_id=cfg.package_id,
            table_cache=dependencies.get_extractor().cache.stats(),
        )

    # ── Register routers ──────────────────────────────────────────────────────

    app.include_router(metrics.router)
    app.include_router(badge_routes.router)

    # ── Static files + Jinja2 templates ───────────────────────────────────────
    _here = Path(__file__).parent.parent  # project root

    static_dir = _here / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    badge_routes.set_templates(Jinja2Templates(directory=str(_here / "templates")))

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
