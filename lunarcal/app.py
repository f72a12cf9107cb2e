import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routers import astronomy as astronomy_router
from .routers import jobs as jobs_router
from .routers import locations as locations_router
from .routers import lunar as lunar_router
from .routers import preferences as preferences_router
from .jobs.generate_astronomy import ensure_worker_started
from .middleware.auth import APIKeyMiddleware
from .middleware.ratelimit import RateLimitMiddleware
from .middleware.logging import LoggingMiddleware
from .services import ephem
from .services.errors import AppError
from .services.locations import ensure_default_location


logger = logging.getLogger(__name__)

ephem.init_paths(os.getenv("EPHE_PATH"))

app = FastAPI(title="lunarcal", version="0.1.0")

app_env = os.getenv("APP_ENV")
is_dev = app_env is None or app_env.lower() in {"dev", "development"}

if is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type", "X-Response-Time-Ms"],
        max_age=86400,
    )
else:
    allowed = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type", "X-Response-Time-Ms"],
        max_age=86400,
    )

app.add_middleware(APIKeyMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(astronomy_router.router)
app.include_router(locations_router.router)
app.include_router(preferences_router.router)
app.include_router(jobs_router.router)
app.include_router(lunar_router.router)


@app.exception_handler(AppError)
async def _app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


# Start worker immediately to support tests that instantiate TestClient
# without lifespan events.
ensure_worker_started()


@app.on_event("startup")
def _startup() -> None:
    ensure_worker_started()
    if os.getenv("BOOTSTRAP_DEFAULT_LOCATION", "false").lower() == "true":
        ensure_default_location()


@app.get("/__health")
def health():
    return {"ok": True, "engine": ephem.ENGINE_VERSION}


@app.get("/")
def root():
    return {"message": "lunarcal API is running. See /__health and /docs."}
