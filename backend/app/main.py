"""
Point d'entrée de l'API de lecture des notes de cours.
Démarrage : uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import configure_logging, settings
from app.errors import StoreError
from app.routers import courses, professors, scores
from app.store import RatingStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : ouvre le stockage (base + cache) au démarrage, le ferme à l'arrêt."""
    configure_logging(settings.LOG_LEVEL)
    app.state.store = RatingStore.from_settings(settings)
    yield
    app.state.store.close()
    logger.info("Stockage fermé.")


app = FastAPI(
    title="Course Rating API",
    description="Lecture des cours, professeurs et notes agrégées",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)


app.include_router(courses.router)
app.include_router(professors.router)
app.include_router(scores.router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Chaque type d'erreur du stockage porte son code HTTP (400, 404, 409, 500)."""
    if exc.status_code >= 500:
        logger.error("Erreur de stockage : %s", exc, exc_info=True)
        return JSONResponse(status_code=exc.status_code, content={"detail": "Une erreur interne est survenue."})
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Course Rating API", "version": "0.1.0"}
