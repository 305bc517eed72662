"""
Router de la planification des cultures
"""

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.models.user import User
from app.schemas.planification import (
    AssociationPrevueResponse,
    BesoinPlantResponse,
    BesoinSemenceResponse,
    CreerCulturesRequest,
    CreerCulturesResponse,
    CulturePrevueResponse,
    RecoltePrevueResponse,
    StatsPlanificationResponse,
)
from app.services import planification as planification_service

router = APIRouter(prefix="/api/v1/planification", tags=["planification"])


def _annee(annee: Optional[int]) -> int:
    return annee or date.today().year


@router.get("/cultures-prevues", response_model=list[CulturePrevueResponse])
def cultures_prevues(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planification_service.cultures_prevues(db, user=current_user, annee=_annee(annee))


@router.get("/recoltes-prevues", response_model=list[RecoltePrevueResponse])
def recoltes_prevues(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    par: Literal["mois", "semaine"] = Query("mois"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planification_service.recoltes_prevues(
        db, user=current_user, annee=_annee(annee), par=par
    )


@router.get("/semences", response_model=list[BesoinSemenceResponse])
def besoins_semences(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planification_service.besoins_semences(db, user=current_user, annee=_annee(annee))


@router.get("/plants", response_model=list[BesoinPlantResponse])
def besoins_plants(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planification_service.besoins_plants(db, user=current_user, annee=_annee(annee))


@router.get("/associations", response_model=list[AssociationPrevueResponse])
def associations_prevues(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planification_service.associations_prevues(
        db, user=current_user, annee=_annee(annee)
    )


@router.post("/creer-cultures", response_model=CreerCulturesResponse, status_code=201)
def creer_cultures(
    # corps, parametres de la requete
    body: CreerCulturesRequest,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planification_service.creer_cultures(
        db,
        user=current_user,
        annee=body.annee,
        planche_ids=body.planche_ids,
        ip_address=client_ip(request),
    )


@router.get("/stats", response_model=StatsPlanificationResponse)
def stats_planification(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planification_service.stats_planification(
        db, user=current_user, annee=_annee(annee)
    )
