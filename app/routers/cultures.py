"""
Router pour la gestion des cultures et de leur arrosage
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import get_owned
from app.models import Culture
from app.models.user import User
from app.schemas.culture import (
    CultureCreate,
    CultureResponse,
    CulturesAIrriguerResponse,
    CultureUpdate,
    IrriguerAction,
    IrriguerResultat,
)
from app.schemas.pagination import PaginatedResponse
from app.services import culture as culture_service

router = APIRouter(prefix="/api/v1/cultures", tags=["cultures"])


def _response(culture: Culture, avertissements: list[str]) -> CultureResponse:
    response = CultureResponse.model_validate(culture)
    response.avertissements = avertissements
    return response


# ── Créer une culture


@router.post("", response_model=CultureResponse, status_code=201)
def create_culture(
    # corps, parametres de la requete
    body: CultureCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    culture, avertissements = culture_service.create_culture(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )
    return _response(culture, avertissements)


# ── Lister les cultures


@router.get("", response_model=PaginatedResponse[CultureResponse])
def list_cultures(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    annee: Optional[int] = Query(None),
    planche: Optional[int] = Query(None, description="Filtrer par planche (id)"),
    espece: Optional[str] = Query(None, description="Filtrer par espèce"),
    etat: Optional[str] = Query(
        None, description="en_cours, terminees ou un état (Planifiée, Semée, ...)"
    ),
    search: Optional[str] = Query(None, description="Recherche espèce, variété, planche, notes"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cultures, total = culture_service.list_cultures(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        annee=annee,
        planche_id=planche,
        espece_id=espece,
        etat=etat,
        search=search,
    )
    return pagination.response(cultures, total)


# ── Cultures à irriguer


@router.get("/irriguer", response_model=CulturesAIrriguerResponse)
def cultures_a_irriguer(
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return culture_service.cultures_a_irriguer(db, user=current_user, annee=annee)


@router.patch("/irriguer", response_model=IrriguerResultat)
def marquer_irrigation(
    # corps, parametres de la requete
    body: IrriguerAction,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ids = list(body.culture_ids or [])
    if body.culture_id is not None:
        ids.append(body.culture_id)
    return culture_service.marquer_irrigation(
        db,
        user=current_user,
        action=body.action,
        culture_ids=ids,
        ip_address=client_ip(request),
    )


# ── Voir une culture


@router.get("/{culture_id}", response_model=CultureResponse)
def get_culture(
    culture_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Culture, culture_id, current_user, "Culture")


# ── Modifier une culture


@router.put("/{culture_id}", response_model=CultureResponse)
def update_culture(
    # corps, parametres de la requete
    culture_id: int,
    body: CultureUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    culture = get_owned(db, Culture, culture_id, current_user, "Culture")
    culture, avertissements = culture_service.update_culture(
        db,
        user=current_user,
        culture=culture,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )
    return _response(culture, avertissements)


# ── Supprimer une culture


@router.delete("/{culture_id}", status_code=204)
def delete_culture(
    culture_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    culture = get_owned(db, Culture, culture_id, current_user, "Culture")
    culture_service.delete_culture(
        db, user=current_user, culture=culture, ip_address=client_ip(request)
    )
