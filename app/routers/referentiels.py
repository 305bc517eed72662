"""
Routers des référentiels du potager
Familles, espèces, variétés, ITP et fournisseurs : lecture pour tout
utilisateur authentifié, écriture réservée aux administrateurs.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user, require_admin
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import (
    resolve_espece,
    resolve_famille,
    resolve_itp,
    resolve_variete,
)
from app.models.user import User
from app.schemas.pagination import PaginatedResponse
from app.schemas.referentiel import (
    EspeceCreate,
    EspeceResponse,
    EspeceUpdate,
    FamilleCreate,
    FamilleResponse,
    FamilleUpdate,
    FournisseurCreate,
    FournisseurResponse,
    FournisseurUpdate,
    ItpCreate,
    ItpResponse,
    ItpUpdate,
    VarieteCreate,
    VarieteResponse,
    VarieteUpdate,
)
from app.services import referentiel as referentiel_service

familles_router = APIRouter(prefix="/api/v1/familles", tags=["familles"])
especes_router = APIRouter(prefix="/api/v1/especes", tags=["especes"])
varietes_router = APIRouter(prefix="/api/v1/varietes", tags=["varietes"])
itps_router = APIRouter(prefix="/api/v1/itps", tags=["itps"])
fournisseurs_router = APIRouter(prefix="/api/v1/fournisseurs", tags=["fournisseurs"])


# ── Familles


@familles_router.get("", response_model=PaginatedResponse[FamilleResponse])
def list_familles(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    items, total = referentiel_service.list_familles(
        db, offset=pagination.offset, limit=pagination.limit, search=search
    )
    return pagination.response(items, total)


@familles_router.post("", response_model=FamilleResponse, status_code=201)
def create_famille(
    # corps, parametres de la requete
    body: FamilleCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return referentiel_service.create_famille(
        db, data=body.model_dump(), actor_id=current_user.id, ip_address=client_ip(request)
    )


@familles_router.get("/{famille_id}", response_model=FamilleResponse)
def get_famille(
    famille_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    famille = resolve_famille(db, famille_id)
    return FamilleResponse(
        id=famille.id,
        intervalle=famille.intervalle,
        couleur=famille.couleur,
        description=famille.description,
        nb_especes=len(famille.especes),
    )


@familles_router.put("/{famille_id}", response_model=FamilleResponse)
def update_famille(
    # corps, parametres de la requete
    famille_id: str,
    body: FamilleUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    famille = resolve_famille(db, famille_id)
    return referentiel_service.update_famille(
        db,
        famille=famille,
        changes=body.model_dump(exclude_unset=True),
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


@familles_router.delete("/{famille_id}", status_code=204)
def delete_famille(
    famille_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    famille = resolve_famille(db, famille_id)
    referentiel_service.delete_famille(
        db, famille=famille, actor_id=current_user.id, ip_address=client_ip(request)
    )


# ── Espèces


@especes_router.get("", response_model=PaginatedResponse[EspeceResponse])
def list_especes(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    famille: Optional[str] = Query(None, description="Filtrer par famille"),
    vivace: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    items, total = referentiel_service.list_especes(
        db,
        offset=pagination.offset,
        limit=pagination.limit,
        famille=famille,
        vivace=vivace,
        search=search,
    )
    return pagination.response(items, total)


@especes_router.post("", response_model=EspeceResponse, status_code=201)
def create_espece(
    # corps, parametres de la requete
    body: EspeceCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return referentiel_service.create_espece(
        db, data=body.model_dump(), actor_id=current_user.id, ip_address=client_ip(request)
    )


@especes_router.get("/{espece_id}", response_model=EspeceResponse)
def get_espece(
    espece_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return resolve_espece(db, espece_id)


@especes_router.put("/{espece_id}", response_model=EspeceResponse)
def update_espece(
    # corps, parametres de la requete
    espece_id: str,
    body: EspeceUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    espece = resolve_espece(db, espece_id)
    return referentiel_service.update_espece(
        db,
        espece=espece,
        changes=body.model_dump(exclude_unset=True),
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


@especes_router.delete("/{espece_id}", status_code=204)
def delete_espece(
    espece_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    espece = resolve_espece(db, espece_id)
    referentiel_service.delete_espece(
        db, espece=espece, actor_id=current_user.id, ip_address=client_ip(request)
    )


# ── Variétés


@varietes_router.get("", response_model=PaginatedResponse[VarieteResponse])
def list_varietes(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    espece: Optional[str] = Query(None, description="Filtrer par espèce"),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    items, total = referentiel_service.list_varietes(
        db, offset=pagination.offset, limit=pagination.limit, espece=espece, search=search
    )
    return pagination.response(items, total)


@varietes_router.post("", response_model=VarieteResponse, status_code=201)
def create_variete(
    # corps, parametres de la requete
    body: VarieteCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return referentiel_service.create_variete(
        db, data=body.model_dump(), actor_id=current_user.id, ip_address=client_ip(request)
    )


@varietes_router.get("/{variete_id}", response_model=VarieteResponse)
def get_variete(
    variete_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return resolve_variete(db, variete_id)


@varietes_router.put("/{variete_id}", response_model=VarieteResponse)
def update_variete(
    # corps, parametres de la requete
    variete_id: str,
    body: VarieteUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    variete = resolve_variete(db, variete_id)
    return referentiel_service.update_variete(
        db,
        variete=variete,
        changes=body.model_dump(exclude_unset=True),
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


@varietes_router.delete("/{variete_id}", status_code=204)
def delete_variete(
    variete_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    variete = resolve_variete(db, variete_id)
    referentiel_service.delete_variete(
        db, variete=variete, actor_id=current_user.id, ip_address=client_ip(request)
    )


# ── Itinéraires techniques


@itps_router.get("", response_model=PaginatedResponse[ItpResponse])
def list_itps(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    espece: Optional[str] = Query(None, description="Filtrer par espèce"),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    items, total = referentiel_service.list_itps(
        db, offset=pagination.offset, limit=pagination.limit, espece=espece, search=search
    )
    return pagination.response(items, total)


@itps_router.post("", response_model=ItpResponse, status_code=201)
def create_itp(
    # corps, parametres de la requete
    body: ItpCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return referentiel_service.create_itp(
        db, data=body.model_dump(), actor_id=current_user.id, ip_address=client_ip(request)
    )


@itps_router.get("/{itp_id}", response_model=ItpResponse)
def get_itp(
    itp_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return resolve_itp(db, itp_id)


@itps_router.put("/{itp_id}", response_model=ItpResponse)
def update_itp(
    # corps, parametres de la requete
    itp_id: str,
    body: ItpUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    itp = resolve_itp(db, itp_id)
    return referentiel_service.update_itp(
        db,
        itp=itp,
        changes=body.model_dump(exclude_unset=True),
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


@itps_router.delete("/{itp_id}", status_code=204)
def delete_itp(
    itp_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    itp = resolve_itp(db, itp_id)
    referentiel_service.delete_itp(
        db, itp=itp, actor_id=current_user.id, ip_address=client_ip(request)
    )


# ── Fournisseurs


@fournisseurs_router.get("", response_model=PaginatedResponse[FournisseurResponse])
def list_fournisseurs(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    items, total = referentiel_service.list_fournisseurs(
        db, offset=pagination.offset, limit=pagination.limit, search=search
    )
    return pagination.response(items, total)


@fournisseurs_router.post("", response_model=FournisseurResponse, status_code=201)
def create_fournisseur(
    # corps, parametres de la requete
    body: FournisseurCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return referentiel_service.create_fournisseur(
        db, data=body.model_dump(), actor_id=current_user.id, ip_address=client_ip(request)
    )


@fournisseurs_router.get("/{fournisseur_id}", response_model=FournisseurResponse)
def get_fournisseur(
    fournisseur_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return referentiel_service.resolve_fournisseur(db, fournisseur_id)


@fournisseurs_router.put("/{fournisseur_id}", response_model=FournisseurResponse)
def update_fournisseur(
    # corps, parametres de la requete
    fournisseur_id: int,
    body: FournisseurUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    fournisseur = referentiel_service.resolve_fournisseur(db, fournisseur_id)
    return referentiel_service.update_fournisseur(
        db,
        fournisseur=fournisseur,
        changes=body.model_dump(exclude_unset=True),
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


@fournisseurs_router.delete("/{fournisseur_id}", status_code=204)
def delete_fournisseur(
    fournisseur_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    fournisseur = referentiel_service.resolve_fournisseur(db, fournisseur_id)
    referentiel_service.delete_fournisseur(
        db, fournisseur=fournisseur, actor_id=current_user.id, ip_address=client_ip(request)
    )
