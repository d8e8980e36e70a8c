"""
Attempt Service
- POST /attempts  store one completed lesson
- GET  /attempts  list attempts by completion time
- GET  /health    liveness probe

Run: python attempts_api.py
 or: uvicorn attempts_api:create_app --factory
"""

import logging
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from attempt_models import Attempt, AttemptCreate
from attempt_store import AttemptStore
from settings import settings

logger = logging.getLogger(__name__)


def create_app(store: Optional[AttemptStore] = None) -> FastAPI:
    app = FastAPI(
        title="Shape Trace Attempts",
        description="Attempt log for the Shape Trace Tutor",
        version=config.APP_VERSION,
    )
    app.state.store = store if store is not None else AttemptStore(settings.DB_PATH)

    # --- CORS MIDDLEWARE ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # --- ERROR HANDLERS ---
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        first = exc.errors()[0]
        loc = list(first.get("loc", ()))
        if loc and loc[0] == "body":
            loc = loc[1:]
        return JSONResponse(
            status_code=400,
            content={"message": first.get("msg", "Invalid request"), "field": ".".join(str(p) for p in loc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.error("API error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    # --- ROUTES ---
    @app.post("/attempts", status_code=201, response_model=Attempt)
    def create_attempt(body: AttemptCreate, request: Request) -> Attempt:
        attempt = request.app.state.store.create_attempt(body)
        logger.info("Stored attempt %d (%s, %dms)", attempt.id, attempt.shape, attempt.duration_ms)
        return attempt

    @app.get("/attempts", response_model=List[Attempt])
    def list_attempts(request: Request) -> List[Attempt]:
        return request.app.state.store.get_attempts()

    @app.get("/health")
    def health_check() -> Dict[str, Any]:
        return {"status": "healthy", "timestamp": datetime.now(UTC).isoformat()}

    # OPTIONS without CORS request headers is not answered by the middleware
    @app.options("/attempts")
    @app.options("/health")
    def preflight() -> Response:
        return Response(status_code=200)

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(), host=settings.HOST, port=settings.PORT)
