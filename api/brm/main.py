import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ALLOWED_ORIGINS, API_PREFIX, COLLECTIONS, LOG_LEVEL, STATIC_DIR, TEMPLATES_SEED_PATH
from .errors import ConflictError, IncompleteSubmissionError, NotFoundError, StorageError
from .routes import include_modular_routers
from .services.seeding import seed_templates_if_empty
from .store import get_store

logger = logging.getLogger(__name__)

app = FastAPI(title="BRM Assessments API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

include_modular_routers(app, prefix=API_PREFIX)


def _error(status_code: int, message: str, details=None) -> JSONResponse:
    body = {"error": message}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(NotFoundError)
async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, str(exc))


@app.exception_handler(ConflictError)
async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(409, str(exc))


@app.exception_handler(IncompleteSubmissionError)
async def handle_incomplete_submission(request: Request, exc: IncompleteSubmissionError) -> JSONResponse:
    return _error(422, str(exc), details=exc.missing)


@app.exception_handler(StorageError)
async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("[API] storage failure on %s %s: %s", request.method, request.url.path, exc)
    return _error(500, "Internal server error")


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(422, "Invalid request body", details=exc.errors())


@app.on_event("startup")
def on_startup() -> None:
    logging.basicConfig(level=LOG_LEVEL)
    store = get_store()
    store.init_collections(COLLECTIONS)
    seed_templates_if_empty(TEMPLATES_SEED_PATH)
    logger.info("[STARTUP] store=%s api_prefix=%s", type(store).__name__, API_PREFIX)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def _static_file(full_path: str) -> Path | None:
    root = STATIC_DIR.resolve()
    candidate = (root / full_path).resolve()
    if full_path and candidate.is_file() and root in candidate.parents:
        return candidate
    return None


if STATIC_DIR.is_dir():

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_client(full_path: str) -> FileResponse:
        if f"/{full_path}".startswith(f"{API_PREFIX}/"):
            raise HTTPException(status_code=404, detail="Not found")
        static = _static_file(full_path)
        if static:
            return FileResponse(static)
        index = STATIC_DIR / "index.html"
        if not index.is_file():
            raise HTTPException(status_code=404, detail="Not found")
        return FileResponse(index)
