"""
Router du verger : arbres, récoltes et opérations
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import get_owned
from app.models import Arbre, OperationArbre, RecolteArbre
from app.models.user import User
from app.schemas.pagination import PaginatedResponse
from app.schemas.verger import (
    ArbreCreate,
    ArbreResponse,
    ArbreUpdate,
    OperationArbreCreate,
    OperationArbreResponse,
    OperationArbreUpdate,
    RecolteArbreCreate,
    RecolteArbreResponse,
    RecolteArbreUpdate,
    StatsVergerResponse,
)
from app.services import verger as verger_service

router = APIRouter(prefix="/api/v1/arbres", tags=["verger"])


# ── Statistiques


@router.get("/stats", response_model=StatsVergerResponse)
def stats_verger(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return verger_service.stats_verger(
        db, user=current_user, annee=annee or date.today().year
    )


# ── Recoltes


@router.post("/recoltes", response_model=RecolteArbreResponse, status_code=201)
def create_recolte(
    # corps, parametres de la requete
    body: RecolteArbreCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return verger_service.create_recolte_arbre(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/recoltes", response_model=PaginatedResponse[RecolteArbreResponse])
def list_recoltes(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    arbre: Optional[int] = Query(None),
    annee: Optional[int] = Query(None),
    statut: Optional[str] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    recoltes, total = verger_service.list_recoltes_arbres(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        arbre_id=arbre,
        annee=annee,
        statut=statut,
    )
    return pagination.response(recoltes, total)


@router.put("/recoltes/{recolte_id}", response_model=RecolteArbreResponse)
def update_recolte(
    # corps, parametres de la requete
    recolte_id: int,
    body: RecolteArbreUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    recolte = get_owned(db, RecolteArbre, recolte_id, current_user, "Récolte")
    return verger_service.update_recolte_arbre(
        db,
        user=current_user,
        recolte=recolte,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/recoltes/{recolte_id}", status_code=204)
def delete_recolte(
    recolte_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    recolte = get_owned(db, RecolteArbre, recolte_id, current_user, "Récolte")
    verger_service.delete_recolte_arbre(
        db, user=current_user, recolte=recolte, ip_address=client_ip(request)
    )


# ── Operations


@router.post("/operations", response_model=OperationArbreResponse, status_code=201)
def create_operation(
    # corps, parametres de la requete
    body: OperationArbreCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return verger_service.create_operation(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/operations", response_model=PaginatedResponse[OperationArbreResponse])
def list_operations(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    arbre: Optional[int] = Query(None),
    type: Optional[str] = Query(None),
    fait: Optional[bool] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    operations, total = verger_service.list_operations(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        arbre_id=arbre,
        type=type,
        fait=fait,
    )
    return pagination.response(operations, total)


@router.put("/operations/{operation_id}", response_model=OperationArbreResponse)
def update_operation(
    # corps, parametres de la requete
    operation_id: int,
    body: OperationArbreUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    operation = get_owned(db, OperationArbre, operation_id, current_user, "Opération")
    return verger_service.update_operation(
        db,
        user=current_user,
        operation=operation,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/operations/{operation_id}", status_code=204)
def delete_operation(
    operation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    operation = get_owned(db, OperationArbre, operation_id, current_user, "Opération")
    verger_service.delete_operation(
        db, user=current_user, operation=operation, ip_address=client_ip(request)
    )


# ── Arbres


@router.post("", response_model=ArbreResponse, status_code=201)
def create_arbre(
    # corps, parametres de la requete
    body: ArbreCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return verger_service.create_arbre(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("", response_model=PaginatedResponse[ArbreResponse])
def list_arbres(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    type: Optional[str] = Query(None),
    productif: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    arbres, total = verger_service.list_arbres(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        type=type,
        productif=productif,
        search=search,
    )
    return pagination.response(arbres, total)


@router.get("/{arbre_id}", response_model=ArbreResponse)
def get_arbre(
    arbre_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Arbre, arbre_id, current_user, "Arbre")


@router.put("/{arbre_id}", response_model=ArbreResponse)
def update_arbre(
    # corps, parametres de la requete
    arbre_id: int,
    body: ArbreUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    arbre = get_owned(db, Arbre, arbre_id, current_user, "Arbre")
    return verger_service.update_arbre(
        db,
        user=current_user,
        arbre=arbre,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/{arbre_id}", status_code=204)
def delete_arbre(
    arbre_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    arbre = get_owned(db, Arbre, arbre_id, current_user, "Arbre")
    verger_service.delete_arbre(db, user=current_user, arbre=arbre, ip_address=client_ip(request))
