"""
Routers des stocks de récoltes et des consommations
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import get_owned
from app.models import Consommation
from app.models.user import User
from app.schemas.pagination import PaginatedResponse
from app.schemas.stock import (
    ConsommationCreate,
    ConsommationResponse,
    ConsommationUpdate,
    StockResponse,
    StockUpdate,
)
from app.services import stock as stock_service

stocks_router = APIRouter(prefix="/api/v1/stocks", tags=["stocks"])
consommations_router = APIRouter(prefix="/api/v1/consommations", tags=["consommations"])


# ── Stocks


@stocks_router.get("", response_model=list[StockResponse])
def list_stocks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return stock_service.list_stocks(db, user=current_user)


@stocks_router.put("/{espece_id}", response_model=StockResponse)
def set_inventaire(
    # corps, parametres de la requete
    espece_id: str,
    body: StockUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return stock_service.set_inventaire(
        db,
        user=current_user,
        espece_id=espece_id,
        inventaire=body.inventaire,
        date_inventaire=body.date_inventaire,
        ip_address=client_ip(request),
    )


# ── Consommations


@consommations_router.post("", response_model=ConsommationResponse, status_code=201)
def create_consommation(
    # corps, parametres de la requete
    body: ConsommationCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return stock_service.create_consommation(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@consommations_router.get("", response_model=PaginatedResponse[ConsommationResponse])
def list_consommations(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    espece: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    consommations, total = stock_service.list_consommations(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        espece_id=espece,
        date_from=date_from,
        date_to=date_to,
    )
    return pagination.response(consommations, total)


@consommations_router.get("/{consommation_id}", response_model=ConsommationResponse)
def get_consommation(
    consommation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Consommation, consommation_id, current_user, "Consommation")


@consommations_router.put("/{consommation_id}", response_model=ConsommationResponse)
def update_consommation(
    # corps, parametres de la requete
    consommation_id: int,
    body: ConsommationUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    consommation = get_owned(db, Consommation, consommation_id, current_user, "Consommation")
    return stock_service.update_consommation(
        db,
        user=current_user,
        consommation=consommation,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@consommations_router.delete("/{consommation_id}", status_code=204)
def delete_consommation(
    consommation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    consommation = get_owned(db, Consommation, consommation_id, current_user, "Consommation")
    stock_service.delete_consommation(
        db, user=current_user, consommation=consommation, ip_address=client_ip(request)
    )
