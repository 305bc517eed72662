"""
Point d'entrée de l'API Gleba
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from .config import settings
from .errors import register_exception_handlers
from .routers import (
    account,
    arbres,
    associations,
    audit,
    auth,
    comptabilite,
    cultures,
    dashboard,
    elevage,
    irrigations,
    planches,
    planification,
    recoltes,
    referentiels,
    rotations,
    stocks,
    taches,
    users,
)

logging.basicConfig(
    level=settings.GLEBA_LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("gleba")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialisation et nettoyage de l'application"""
    # Démarrage : le schéma est géré par les migrations Alembic
    logger.info("Démarrage de %s %s", settings.GLEBA_API_TITLE, settings.GLEBA_API_VERSION)
    yield
    # Arrêt
    from .database import engine

    engine.dispose()


app = FastAPI(
    title=settings.GLEBA_API_TITLE,
    description=(
        "API REST de gestion de ferme : potager (planches, cultures, rotations, "
        "irrigation, planification), verger, élevage et comptabilité."
    ),
    version=settings.GLEBA_API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(account.router)
app.include_router(users.router)
app.include_router(audit.router)
app.include_router(referentiels.familles_router)
app.include_router(referentiels.especes_router)
app.include_router(referentiels.varietes_router)
app.include_router(referentiels.itps_router)
app.include_router(referentiels.fournisseurs_router)
app.include_router(associations.router)
app.include_router(planches.router)
app.include_router(rotations.router)
app.include_router(cultures.router)
app.include_router(recoltes.router)
app.include_router(irrigations.router)
app.include_router(planification.router)
app.include_router(stocks.stocks_router)
app.include_router(stocks.consommations_router)
app.include_router(arbres.router)
app.include_router(elevage.router)
app.include_router(comptabilite.router)
app.include_router(dashboard.router)
app.include_router(taches.taches_router)
app.include_router(taches.calendrier_router)


@app.get("/", tags=["health"])
def root():
    """Point de vérification de l'état de l'API"""
    return {
        "name": settings.GLEBA_API_TITLE,
        "version": settings.GLEBA_API_VERSION,
        "status": "ok",
    }
