# app/main.py
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import ServiceError, ValidationError
from app.core.logging import setup_logging
from app.db.init_db import init_models

# routers
from app.auth.router import router as auth_router
from app.users.router import router as users_router

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
log = logging.getLogger("uvicorn")

app = FastAPI(title="Messagely API")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        log.error("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # same {detail, kind} shape as a blank field caught by the services;
    # field names only, never the submitted values
    missing, invalid = [], []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        (missing if err.get("type") == "missing" else invalid).append(field)

    parts = []
    if missing:
        parts.append(f"missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"invalid fields: {', '.join(invalid)}")
    return await service_error_handler(request, ValidationError("; ".join(parts)))


@app.on_event("startup")
async def on_startup():
    log.info("🚀 Starting service…")
    await init_models()
    log.info("✅ Startup ready.")


@app.get("/api/health/")
async def health():
    return {"ok": True, "service": "messagely"}


# routers
app.include_router(auth_router)   # /api/auth/...
app.include_router(users_router)  # /api/users/...
