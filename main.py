# main.py

import os
import uvicorn  # type: ignore
import logging
from fastapi import FastAPI, Request  # type: ignore
from fastapi.exceptions import RequestValidationError  # type: ignore
from fastapi.middleware.cors import CORSMiddleware  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from starlette.exceptions import HTTPException as StarletteHTTPException  # type: ignore
from dotenv import load_dotenv  # type: ignore

load_dotenv()  # Load environment variables from .env
logger = logging.getLogger(__name__)

ADMIN_PATH_PREFIXES = ("/api/cars", "/api/admin-login")

STATUS_LABELS = {
    404: "Not found",
    405: "Method not allowed",
}


def get_application() -> FastAPI:
    app = FastAPI(
        title="W&M Autoparadies",
        description="Inventory, contact and valuation API for the W&M Autoparadies site",
        version=os.getenv("API_VERSION", "1.0.0"),
    )

    # ── Routers ───────────────────────────────────────────────────────────────
    from api.routers.cars import router as cars_router
    from api.routers.auth import router as auth_router
    from api.routers.submissions import router as submissions_router
    from api.utils.config import get_settings

    # ── Request logging (never logs the credential itself) ───────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if request.url.path.startswith(ADMIN_PATH_PREFIXES) and request.method != "GET":
            auth_header = request.headers.get("authorization")
            logger.info(
                f"Request to {request.method} {request.url.path} "
                f"(Authorization header: {'Present' if auth_header else 'Missing'})"
            )

        response = await call_next(request)
        return response

    # ── Error shape: {"error": "<label>"} ────────────────────────────────────
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        label = exc.detail if isinstance(exc.detail, str) else None
        if not label or exc.status_code in STATUS_LABELS:
            label = STATUS_LABELS.get(exc.status_code, label or "Error")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": label},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected malformed request to {request.method} {request.url.path}")
        return JSONResponse(status_code=400, content={"error": "Bad request"})

    # ── CORS middleware ───────────────────────────────────────────────────────
    allow_origins = get_settings().cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(cars_router, prefix="/api", tags=["Inventory"])
    app.include_router(auth_router, prefix="/api", tags=["Admin"])
    app.include_router(submissions_router, prefix="/api", tags=["Contact & Valuation"])

    # ── Health check ─────────────────────────────────────────────────────────
    @app.get("/", tags=["Health"])
    async def read_root():
        return {"message": "Welcome to the W&M Autoparadies API!"}

    return app


app = get_application()

# ── Entry point ──────────────────────────────────────────────────────────────
if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    port = int(os.getenv("PORT", 8080))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
