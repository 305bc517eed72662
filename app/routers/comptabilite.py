"""
Router de la comptabilité
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
from app.models import Client, DepenseManuelle, Facture, VenteManuelle
from app.models.user import User
from app.schemas.comptabilite import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    DepenseCreate,
    DepenseResponse,
    DepenseUpdate,
    FactureCreate,
    FactureListResponse,
    FactureResponse,
    FactureUpdate,
    ResumeTvaResponse,
    StatsComptaResponse,
    VenteManuelleCreate,
    VenteManuelleResponse,
    VenteManuelleUpdate,
)
from app.schemas.pagination import PaginatedResponse
from app.services import comptabilite as compta_service

router = APIRouter(prefix="/api/v1/comptabilite", tags=["comptabilite"])


# ── Clients


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(
    # corps, parametres de la requete
    body: ClientCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return compta_service.create_client(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/clients", response_model=PaginatedResponse[ClientResponse])
def list_clients(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    actif: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    clients, total = compta_service.list_clients(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        actif=actif,
        search=search,
    )
    return pagination.response(clients, total)


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Client, client_id, current_user, "Client")


@router.put("/clients/{client_id}", response_model=ClientResponse)
def update_client(
    # corps, parametres de la requete
    client_id: int,
    body: ClientUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = get_owned(db, Client, client_id, current_user, "Client")
    return compta_service.update_client(
        db,
        user=current_user,
        client=client,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/clients/{client_id}", status_code=204)
def delete_client(
    client_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = get_owned(db, Client, client_id, current_user, "Client")
    compta_service.delete_client(db, user=current_user, client=client, ip_address=client_ip(request))


# ── Factures


@router.post("/factures", response_model=FactureResponse, status_code=201)
def create_facture(
    # corps, parametres de la requete
    body: FactureCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return compta_service.create_facture(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/factures", response_model=FactureListResponse)
def list_factures(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    annee: Optional[int] = Query(None),
    statut: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    client: Optional[int] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    factures, total, totaux = compta_service.list_factures(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        annee=annee,
        statut=statut,
        type=type,
        client_id=client,
    )
    return FactureListResponse(
        items=factures,
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=math.ceil(total / pagination.per_page) if total else 0,
        totaux=totaux,
    )


@router.get("/factures/{facture_id}", response_model=FactureResponse)
def get_facture(
    facture_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Facture, facture_id, current_user, "Facture")


@router.put("/factures/{facture_id}", response_model=FactureResponse)
def update_facture(
    # corps, parametres de la requete
    facture_id: int,
    body: FactureUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    facture = get_owned(db, Facture, facture_id, current_user, "Facture")
    return compta_service.update_facture(
        db,
        user=current_user,
        facture=facture,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/factures/{facture_id}", status_code=204)
def annuler_facture(
    facture_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    facture = get_owned(db, Facture, facture_id, current_user, "Facture")
    compta_service.annuler_facture(
        db, user=current_user, facture=facture, ip_address=client_ip(request)
    )


# ── Depenses manuelles


@router.post("/depenses-manuelles", response_model=DepenseResponse, status_code=201)
def create_depense(
    # corps, parametres de la requete
    body: DepenseCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return compta_service.create_depense(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/depenses-manuelles", response_model=PaginatedResponse[DepenseResponse])
def list_depenses(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    annee: Optional[int] = Query(None),
    categorie: Optional[str] = Query(None),
    module: Optional[str] = Query(None),
    paye: Optional[bool] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    depenses, total = compta_service.list_depenses(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        annee=annee,
        categorie=categorie,
        module=module,
        paye=paye,
    )
    return pagination.response(depenses, total)


@router.put("/depenses-manuelles/{depense_id}", response_model=DepenseResponse)
def update_depense(
    # corps, parametres de la requete
    depense_id: int,
    body: DepenseUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    depense = get_owned(db, DepenseManuelle, depense_id, current_user, "Dépense")
    return compta_service.update_depense(
        db,
        user=current_user,
        depense=depense,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/depenses-manuelles/{depense_id}", status_code=204)
def delete_depense(
    depense_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    depense = get_owned(db, DepenseManuelle, depense_id, current_user, "Dépense")
    compta_service.delete_depense(
        db, user=current_user, depense=depense, ip_address=client_ip(request)
    )


# ── Ventes manuelles


@router.post("/ventes-manuelles", response_model=VenteManuelleResponse, status_code=201)
def create_vente_manuelle(
    # corps, parametres de la requete
    body: VenteManuelleCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return compta_service.create_vente_manuelle(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/ventes-manuelles", response_model=PaginatedResponse[VenteManuelleResponse])
def list_ventes_manuelles(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    annee: Optional[int] = Query(None),
    categorie: Optional[str] = Query(None),
    module: Optional[str] = Query(None),
    paye: Optional[bool] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ventes, total = compta_service.list_ventes_manuelles(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        annee=annee,
        categorie=categorie,
        module=module,
        paye=paye,
    )
    return pagination.response(ventes, total)


@router.put("/ventes-manuelles/{vente_id}", response_model=VenteManuelleResponse)
def update_vente_manuelle(
    # corps, parametres de la requete
    vente_id: int,
    body: VenteManuelleUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vente = get_owned(db, VenteManuelle, vente_id, current_user, "Vente")
    return compta_service.update_vente_manuelle(
        db,
        user=current_user,
        vente=vente,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/ventes-manuelles/{vente_id}", status_code=204)
def delete_vente_manuelle(
    vente_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vente = get_owned(db, VenteManuelle, vente_id, current_user, "Vente")
    compta_service.delete_vente_manuelle(
        db, user=current_user, vente=vente, ip_address=client_ip(request)
    )


# ── Statistiques


@router.get("/stats", response_model=StatsComptaResponse)
def stats_comptabilite(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return compta_service.stats_comptabilite(
        db, user=current_user, annee=annee or date.today().year
    )


@router.get("/tva", response_model=ResumeTvaResponse)
def resume_tva(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    trimestre: Optional[int] = Query(None, ge=1, le=4),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Résumé de TVA collectée et déductible par taux, sur l'année ou un trimestre"""
    return compta_service.resume_tva(
        db, user=current_user, annee=annee or date.today().year, trimestre=trimestre
    )
