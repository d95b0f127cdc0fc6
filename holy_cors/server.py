import logging
import ssl
from typing import Optional

from fastapi import FastAPI, Request
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from prometheus_client import CollectorRegistry, Info
from prometheus_fastapi_instrumentator import Instrumentator

from holy_cors.config import Configuration
from holy_cors.cors import error_response
from holy_cors.errors import ProxyError
from holy_cors.routes import get_proxy_routes, router
from holy_cors.tracing import configure_tracing
from holy_cors.vars import OTLP_ENDPOINT, OTLP_HEADERS, SERVICE_NAME

logger = logging.getLogger("uvicorn.error")

configure_tracing(SERVICE_NAME, OTLP_ENDPOINT, OTLP_HEADERS)


async def proxy_error_handler(request: Request, exc: ProxyError):
    return error_response(exc.status_code, exc.message)


def create_app(config: Optional[Configuration] = None) -> FastAPI:
    """
    Build the proxy application around one immutable configuration.

    The generated API docs are disabled: ``/openapi.json`` and friends are
    valid proxy targets.
    """
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.config = config or Configuration.from_env()
    # Platform trust store, shared by all outbound connections
    app.state.ssl_context = ssl.create_default_context()

    registry = CollectorRegistry()
    Instrumentator(registry=registry).instrument(app).expose(app)
    app_info = Info("holy_cors_app_info", "Application Info", registry=registry)
    app_info.info({"app_name": SERVICE_NAME})

    FastAPIInstrumentor.instrument_app(app)

    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.include_router(router)
    app.router.routes.extend(get_proxy_routes())
    return app


app = create_app()
