from fastapi import FastAPI, Request
from api.schedule import router as schedule_router
from api.insights import router as insights_router
from api.healthcheck import router as healthcheck_router
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi
from dotenv import load_dotenv
import os
from utils.logger import configure_logging
import logging
import secrets

load_dotenv()
configure_logging()
logger = logging.getLogger("api")


def _env_list(name: str) -> list[str]:
    """Comma separated environment value as a list, empty entries dropped."""
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


# env
API_KEY = os.getenv("API_KEY")
API_KEY_HEADER = "x-api-key"
CORS_ALLOW_ORIGINS = _env_list("CORS_ALLOW_ORIGINS")
ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS") or ["*"]
MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", "0"))  # 0 = no limit
HEALTH_PATH = "/api/health/check"

if not API_KEY:
    logger.warning("⚠️ API_KEY not set; requests are not authenticated (dev mode).")

app = FastAPI(
    title="Studio Class Scheduler",
    version="0.1.0",
    openapi_tags=[
        {"name": "Schedule", "description": "Synthesis, gap filling and manual edit checks"},
        {"name": "Insights", "description": "Historical performance and optimisation suggestions"},
        {"name": "Health Check", "description": "Liveness probe"},
    ],
)

# paths reachable without a key: the health probe and the API docs
PUBLIC_PATHS = {HEALTH_PATH, "/openapi.json", "/docs", "/redoc"}
PUBLIC_PREFIXES = ("/docs/",)


def is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


# middlewares
if os.getenv("ENABLE_CORS") == "true":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(TrustedHostMiddleware, allowed_hosts=ALLOWED_HOSTS)


@app.middleware("http")
async def reject_large_bodies(request: Request, call_next):
    """Refuse bodies over MAX_BODY_BYTES before they are parsed."""
    length = request.headers.get("content-length")
    if MAX_BODY_BYTES > 0 and length and length.isdigit() and int(length) > MAX_BODY_BYTES:
        logger.info(f"🚫 Rejected {request.url.path}: body of {length} bytes")
        return JSONResponse(status_code=413, content={"detail": "Payload too large"})
    return await call_next(request)


@app.middleware("http")
async def require_api_key(request: Request, call_next):
    # API_KEY is looked up per request
    if request.method == "OPTIONS" or is_public(request.url.path) or not API_KEY:
        return await call_next(request)

    supplied = request.headers.get(API_KEY_HEADER)
    if not supplied or not secrets.compare_digest(str(supplied), str(API_KEY)):
        logger.debug(f"Unauthorized request to {request.url.path}")
        return JSONResponse(status_code=401, content={"detail": "Unauthorized"})
    return await call_next(request)


def custom_openapi():
    """OpenAPI schema with the x-api-key scheme on every operation except the health probe."""
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description="Weekly fitness class schedule synthesis from historical class performance",
        routes=app.routes,
        tags=app.openapi_tags,
    )
    schema.setdefault("components", {}).setdefault("securitySchemes", {})["ApiKeyAuth"] = {
        "type": "apiKey",
        "in": "header",
        "name": API_KEY_HEADER,
        "description": "Enter your API key",
    }
    for path, operations in schema.get("paths", {}).items():
        for operation in operations.values():
            operation["security"] = [] if is_public(path) else [{"ApiKeyAuth": []}]

    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi

# Register routers
for router in (schedule_router, insights_router, healthcheck_router):
    app.include_router(router, prefix="/api")
