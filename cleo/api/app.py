# This file builds the FastAPI application and registers all API routers.
# Startup bootstraps the schema, administrator and instance row unless disabled.
# The middleware adds request IDs, timing headers and Prometheus metrics labelled by route template.

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import RequestResponseEndpoint
from starlette.routing import Match

from cleo.api.api_config import get_api_config
from cleo.api.bootstrap import bootstrap_instance
from cleo.api.dependencies import get_database_client
from cleo.api.error_handlers import register_error_handlers
from cleo.api.routers.admin import router as admin_router
from cleo.api.routers.ecf import router as ecf_router
from cleo.api.routers.email import router as email_router
from cleo.api.routers.files import router as files_router
from cleo.api.routers.general import router as general_router
from cleo.api.routers.health import router as health_router
from cleo.api.routers.keys import router as keys_router
from cleo.api.routers.posts import router as posts_router
from cleo.api.routers.tokens import router as tokens_router
from cleo.api.routers.users import router as users_router
from cleo.api.schemas.common import ERROR_RESPONSES
from cleo.common.logging import configure_logging
from cleo.common.settings import get_settings

logger = logging.getLogger(__name__)

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method", "path"],
)

UNMATCHED_PATH_LABEL = "unmatched"


def route_template(app: FastAPI, request: Request) -> str:
    """Return the path template serving `request`, keeping metric label cardinality bounded."""

    for route in app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_PATH_LABEL)
    return UNMATCHED_PATH_LABEL


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    app = FastAPI(
        title=config.api_name,
        description=(
            "Headless content management API: accounts, posts and pages with extra fields, "
            "file uploads, sign-up keys and instance administration."
        ),
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {"name": "admin", "description": "Instance settings and user listings for administrators."},
            {"name": "ecf", "description": "Extra key/value fields attached to posts."},
            {"name": "email", "description": "Email address verification links."},
            {"name": "files", "description": "File uploads and public file serving."},
            {"name": "general", "description": "Listings of the caller's posts and files."},
            {"name": "keys", "description": "Sign-up keys issued by administrators."},
            {"name": "posts", "description": "Posts and pages."},
            {"name": "tokens", "description": "API token issue and revocation."},
            {"name": "users", "description": "Account sign-up, profile changes and deletion."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials="*" not in config.allowed_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        path_label = route_template(app, request)
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0
            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"
            return response
        finally:
            duration_s = time.perf_counter() - started
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).dec()

    if config.enable_metrics:

        @app.get("/metrics", include_in_schema=False)
        def metrics() -> Response:
            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def startup_bootstrap() -> None:
        if not config.bootstrap_on_startup:
            app.state.bootstrap_result = None
            return
        try:
            app.state.bootstrap_result = bootstrap_instance(get_database_client(), get_settings())
        except Exception:
            logger.exception("Instance bootstrap failed")
            raise

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(admin_router, responses=ERROR_RESPONSES)
    app.include_router(ecf_router, responses=ERROR_RESPONSES)
    app.include_router(email_router, responses=ERROR_RESPONSES)
    app.include_router(files_router, responses=ERROR_RESPONSES)
    app.include_router(general_router, responses=ERROR_RESPONSES)
    app.include_router(keys_router, responses=ERROR_RESPONSES)
    app.include_router(posts_router, responses=ERROR_RESPONSES)
    app.include_router(tokens_router, responses=ERROR_RESPONSES)
    app.include_router(users_router, responses=ERROR_RESPONSES)

    return app


app = create_app()
