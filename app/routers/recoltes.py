"""
Router pour la gestion des récoltes
"""

import math
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import get_owned
from app.models import Recolte
from app.models.user import User
from app.schemas.culture import (
    RecolteCreate,
    RecolteListResponse,
    RecolteResponse,
    RecolteUpdate,
)
from app.services import recolte as recolte_service

router = APIRouter(prefix="/api/v1/recoltes", tags=["recoltes"])


@router.post("", response_model=RecolteResponse, status_code=201)
def create_recolte(
    # corps, parametres de la requete
    body: RecolteCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return recolte_service.create_recolte(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("", response_model=RecolteListResponse)
def list_recoltes(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    annee: Optional[int] = Query(None),
    espece: Optional[str] = Query(None),
    culture: Optional[int] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    recoltes, total, quantite = recolte_service.list_recoltes(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        annee=annee,
        espece_id=espece,
        culture_id=culture,
        date_from=date_from,
        date_to=date_to,
    )
    return RecolteListResponse(
        items=recoltes,
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=math.ceil(total / pagination.per_page) if total else 0,
        total_quantite=quantite,
    )


@router.get("/{recolte_id}", response_model=RecolteResponse)
def get_recolte(
    recolte_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Recolte, recolte_id, current_user, "Récolte")


@router.put("/{recolte_id}", response_model=RecolteResponse)
def update_recolte(
    # corps, parametres de la requete
    recolte_id: int,
    body: RecolteUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    recolte = get_owned(db, Recolte, recolte_id, current_user, "Récolte")
    return recolte_service.update_recolte(
        db,
        user=current_user,
        recolte=recolte,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/{recolte_id}", status_code=204)
def delete_recolte(
    recolte_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    recolte = get_owned(db, Recolte, recolte_id, current_user, "Récolte")
    recolte_service.delete_recolte(
        db, user=current_user, recolte=recolte, ip_address=client_ip(request)
    )
