"""
Routers des tâches de la période et du calendrier des cultures
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import get_current_user
from app.models.user import User
from app.schemas.taches import CalendrierResponse, TachesResponse
from app.services import taches as taches_service

taches_router = APIRouter(prefix="/api/v1/taches", tags=["taches"])
calendrier_router = APIRouter(prefix="/api/v1/calendrier", tags=["calendrier"])


@taches_router.get("", response_model=TachesResponse)
def get_taches(
    # corps, parametres de la requete
    start: date = Query(...),
    end: date = Query(...),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Semis, plantations et récoltes de la période, cultures à arroser"""
    return taches_service.taches(db, user=current_user, debut=start, fin=end)


@calendrier_router.get("", response_model=CalendrierResponse)
def get_calendrier(
    # corps, parametres de la requete
    start: date = Query(...),
    end: date = Query(...),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return taches_service.calendrier(db, user=current_user, debut=start, fin=end)
