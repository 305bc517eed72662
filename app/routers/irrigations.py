"""
Router des irrigations planifiées
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import get_owned
from app.models import IrrigationPlanifiee
from app.models.user import User
from app.schemas.culture import (
    GenererIrrigations,
    GenererIrrigationsResponse,
    IrrigationCreate,
    IrrigationResponse,
    IrrigationUpdate,
)
from app.schemas.pagination import PaginatedResponse
from app.services import irrigation as irrigation_service

router = APIRouter(prefix="/api/v1/irrigations", tags=["irrigations"])


@router.post("", response_model=IrrigationResponse, status_code=201)
def create_irrigation(
    # corps, parametres de la requete
    body: IrrigationCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return irrigation_service.create_irrigation(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("", response_model=PaginatedResponse[IrrigationResponse])
def list_irrigations(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    culture: Optional[int] = Query(None),
    fait: Optional[bool] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    irrigations, total = irrigation_service.list_irrigations(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        culture_id=culture,
        fait=fait,
        date_from=date_from,
        date_to=date_to,
    )
    return pagination.response(irrigations, total)


# ── Générer le calendrier d'arrosage


@router.post("/generer", response_model=GenererIrrigationsResponse)
def generer_irrigations(
    # corps, parametres de la requete
    body: GenererIrrigations,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return irrigation_service.generer_irrigations(
        db,
        annee=body.annee,
        force=body.force,
        user_id=current_user.id,
        ip_address=client_ip(request),
    )


@router.get("/{irrigation_id}", response_model=IrrigationResponse)
def get_irrigation(
    irrigation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, IrrigationPlanifiee, irrigation_id, current_user, "Irrigation")


@router.put("/{irrigation_id}", response_model=IrrigationResponse)
def update_irrigation(
    # corps, parametres de la requete
    irrigation_id: int,
    body: IrrigationUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    irrigation = get_owned(db, IrrigationPlanifiee, irrigation_id, current_user, "Irrigation")
    return irrigation_service.update_irrigation(
        db,
        user=current_user,
        irrigation=irrigation,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/{irrigation_id}", status_code=204)
def delete_irrigation(
    irrigation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    irrigation = get_owned(db, IrrigationPlanifiee, irrigation_id, current_user, "Irrigation")
    irrigation_service.delete_irrigation(
        db, user=current_user, irrigation=irrigation, ip_address=client_ip(request)
    )
