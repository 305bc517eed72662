"""
Router pour la gestion des planches
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import resolve_planche
from app.models.user import User
from app.schemas.pagination import PaginatedResponse
from app.schemas.planche import (
    OccupationRequest,
    OccupationResponse,
    PlancheCreate,
    PlancheHistoryResponse,
    PlancheResponse,
    PlancheUpdate,
    RotationAdviceResponse,
    SolResponse,
)
from app.services import planche as planche_service

router = APIRouter(prefix="/api/v1/planches", tags=["planches"])


# ── Créer une planche


@router.post("", response_model=PlancheResponse, status_code=201)
def create_planche(
    # corps, parametres de la requete
    body: PlancheCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return planche_service.create_planche(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


# ── Lister les planches


@router.get("", response_model=PaginatedResponse[PlancheResponse])
def list_planches(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    ilot: Optional[str] = Query(None),
    type: Optional[str] = Query(None, description="Serre, Plein champ, Tunnel, Chassis"),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    planches, total = planche_service.list_planches(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        ilot=ilot,
        type_planche=type,
        search=search,
    )
    return pagination.response(planches, total)


# ── Voir une planche


@router.get("/{id_or_name}", response_model=PlancheResponse)
def get_planche(
    id_or_name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return resolve_planche(db, current_user, id_or_name)


# ── Modifier une planche


@router.put("/{id_or_name}", response_model=PlancheResponse)
def update_planche(
    # corps, parametres de la requete
    id_or_name: str,
    body: PlancheUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    planche = resolve_planche(db, current_user, id_or_name)
    return planche_service.update_planche(
        db,
        user=current_user,
        planche=planche,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


# ── Supprimer une planche


@router.delete("/{id_or_name}", status_code=204)
def delete_planche(
    id_or_name: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    planche = resolve_planche(db, current_user, id_or_name)
    planche_service.delete_planche(
        db, user=current_user, planche=planche, ip_address=client_ip(request)
    )


# ── Historique des cultures


@router.get("/{id_or_name}/history", response_model=PlancheHistoryResponse)
def planche_history(
    id_or_name: str,
    years: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    planche = resolve_planche(db, current_user, id_or_name)
    return planche_service.planche_history(
        db, user=current_user, planche=planche, years=years
    )


# ── Conseils de rotation


@router.get("/{id_or_name}/rotation-advice", response_model=RotationAdviceResponse)
def rotation_advice(
    id_or_name: str,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    espece_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    planche = resolve_planche(db, current_user, id_or_name)
    return planche_service.rotation_advice(
        db, user=current_user, planche=planche, annee=year, espece_id=espece_id
    )


# ── Vérifier l'occupation


@router.post("/{id_or_name}/verifier-occupation", response_model=OccupationResponse)
def verifier_occupation(
    # corps, parametres de la requete
    id_or_name: str,
    body: OccupationRequest,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    planche = resolve_planche(db, current_user, id_or_name)
    return planche_service.verifier_occupation(db, planche=planche, data=body.model_dump())


# ── Analyse du sol


@router.get("/{id_or_name}/sol", response_model=SolResponse)
def analyse_sol(
    id_or_name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    planche = resolve_planche(db, current_user, id_or_name)
    return planche_service.analyse_sol(planche)
