from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from csbridge.api.content_summary import router as content_summary_router
from csbridge.auth.identity import IdentityError
from csbridge.config import cors_origins
from csbridge.logging.ndjson import init_logging, log_event


def _load_dotenvs() -> None:
    """
    Load environment variables from:
    - backend/.env
    - repo-root/.env
    """
    from dotenv import load_dotenv

    backend_dir = Path(__file__).resolve().parents[1]
    repo_root = backend_dir.parent

    load_dotenv(backend_dir / ".env")
    load_dotenv(repo_root / ".env")


def create_app() -> FastAPI:
    _load_dotenvs()
    init_logging()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        log_event(level="info", event="app.startup", data={"ok": True})
        yield

    app = FastAPI(title="Content Summary Bridge", version="0.1.0", lifespan=lifespan)

    origins = cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    @app.get("/api/health")
    def health() -> dict:
        return {"ok": True}

    @app.exception_handler(IdentityError)
    async def identity_error(request: Request, exc: IdentityError) -> JSONResponse:
        log_event(
            level="warning",
            event="auth.identity_failed",
            data={"path": str(request.url.path), "error": str(exc)},
        )
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.middleware("http")
    async def log_exceptions(request, call_next):  # type: ignore[no-untyped-def]
        try:
            return await call_next(request)
        except Exception as e:  # noqa: BLE001
            log_event(
                level="error",
                event="api.exception",
                data={"method": request.method, "path": str(request.url.path), "error": str(e)},
            )
            raise

    app.include_router(content_summary_router)
    return app


app = create_app()
