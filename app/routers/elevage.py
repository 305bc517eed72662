"""
Router de l'élevage
"""

import math
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user, require_admin
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import get_owned, resolve_espece_animale
from app.models import (
    Animal,
    ConsommationAliment,
    LotAnimaux,
    ProductionOeufs,
    SoinAnimal,
    VenteProduit,
)
from app.models.user import User
from app.schemas.elevage import (
    AlimentCreate,
    AlimentListResponse,
    AlimentResponse,
    AlimentUpdate,
    AnimalCreate,
    AnimalResponse,
    AnimalUpdate,
    ConsommationAlimentCreate,
    ConsommationAlimentResponse,
    EspeceAnimaleCreate,
    EspeceAnimaleResponse,
    EspeceAnimaleUpdate,
    LotCreate,
    LotResponse,
    LotUpdate,
    ProductionOeufsCreate,
    ProductionOeufsResponse,
    ProductionOeufsUpdate,
    SoinCreate,
    SoinResponse,
    SoinUpdate,
    StatsElevageResponse,
    StockAlimentUpdate,
    VenteCreate,
    VenteListResponse,
    VenteResponse,
    VenteUpdate,
)
from app.schemas.pagination import PaginatedResponse
from app.services import elevage as elevage_service

router = APIRouter(prefix="/api/v1/elevage", tags=["elevage"])


# ── Especes animales


@router.get("/especes-animales", response_model=PaginatedResponse[EspeceAnimaleResponse])
def list_especes_animales(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    type: Optional[str] = Query(None),
    production: Optional[str] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    especes, total = elevage_service.list_especes_animales(
        db, offset=pagination.offset, limit=pagination.limit, type=type, production=production
    )
    return pagination.response(especes, total)


@router.post("/especes-animales", response_model=EspeceAnimaleResponse, status_code=201)
def create_espece_animale(
    # corps, parametres de la requete
    body: EspeceAnimaleCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return elevage_service.create_espece_animale(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/especes-animales/{espece_id}", response_model=EspeceAnimaleResponse)
def get_espece_animale(
    espece_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return resolve_espece_animale(db, espece_id)


@router.put("/especes-animales/{espece_id}", response_model=EspeceAnimaleResponse)
def update_espece_animale(
    # corps, parametres de la requete
    espece_id: str,
    body: EspeceAnimaleUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    espece = resolve_espece_animale(db, espece_id)
    return elevage_service.update_espece_animale(
        db,
        user=current_user,
        espece=espece,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/especes-animales/{espece_id}", status_code=204)
def delete_espece_animale(
    espece_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    espece = resolve_espece_animale(db, espece_id)
    elevage_service.delete_espece_animale(
        db, user=current_user, espece=espece, ip_address=client_ip(request)
    )


# ── Lots


@router.post("/lots", response_model=LotResponse, status_code=201)
def create_lot(
    # corps, parametres de la requete
    body: LotCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.create_lot(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/lots", response_model=PaginatedResponse[LotResponse])
def list_lots(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    espece: Optional[str] = Query(None),
    statut: Optional[str] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lots, total = elevage_service.list_lots(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        espece_animale_id=espece,
        statut=statut,
    )
    return pagination.response(lots, total)


@router.get("/lots/{lot_id}", response_model=LotResponse)
def get_lot(
    lot_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, LotAnimaux, lot_id, current_user, "Lot")


@router.put("/lots/{lot_id}", response_model=LotResponse)
def update_lot(
    # corps, parametres de la requete
    lot_id: int,
    body: LotUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lot = get_owned(db, LotAnimaux, lot_id, current_user, "Lot")
    return elevage_service.update_lot(
        db,
        user=current_user,
        lot=lot,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/lots/{lot_id}", status_code=204)
def delete_lot(
    lot_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lot = get_owned(db, LotAnimaux, lot_id, current_user, "Lot")
    elevage_service.delete_lot(db, user=current_user, lot=lot, ip_address=client_ip(request))


# ── Animaux


@router.post("/animaux", response_model=AnimalResponse, status_code=201)
def create_animal(
    # corps, parametres de la requete
    body: AnimalCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.create_animal(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/animaux", response_model=PaginatedResponse[AnimalResponse])
def list_animaux(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    espece: Optional[str] = Query(None),
    lot: Optional[int] = Query(None),
    statut: Optional[str] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    animaux, total = elevage_service.list_animaux(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        espece_animale_id=espece,
        lot_id=lot,
        statut=statut,
    )
    return pagination.response(animaux, total)


@router.get("/animaux/{animal_id}", response_model=AnimalResponse)
def get_animal(
    animal_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Animal, animal_id, current_user, "Animal")


@router.put("/animaux/{animal_id}", response_model=AnimalResponse)
def update_animal(
    # corps, parametres de la requete
    animal_id: int,
    body: AnimalUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    animal = get_owned(db, Animal, animal_id, current_user, "Animal")
    return elevage_service.update_animal(
        db,
        user=current_user,
        animal=animal,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/animaux/{animal_id}", status_code=204)
def delete_animal(
    animal_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    animal = get_owned(db, Animal, animal_id, current_user, "Animal")
    elevage_service.delete_animal(
        db, user=current_user, animal=animal, ip_address=client_ip(request)
    )


# ── Aliments


@router.get("/aliments", response_model=AlimentListResponse)
def list_aliments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.list_aliments(db, user=current_user)


@router.post("/aliments", response_model=AlimentResponse, status_code=201)
def create_aliment(
    # corps, parametres de la requete
    body: AlimentCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return elevage_service.create_aliment(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.put("/aliments/{aliment_id}", response_model=AlimentResponse)
def update_aliment(
    # corps, parametres de la requete
    aliment_id: int,
    body: AlimentUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    aliment = elevage_service.resolve_aliment(db, aliment_id)
    return elevage_service.update_aliment(
        db,
        user=current_user,
        aliment=aliment,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/aliments/{aliment_id}", status_code=204)
def delete_aliment(
    aliment_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    aliment = elevage_service.resolve_aliment(db, aliment_id)
    elevage_service.delete_aliment(
        db, user=current_user, aliment=aliment, ip_address=client_ip(request)
    )


@router.put("/aliments/{aliment_id}/stock", response_model=AlimentResponse)
def set_stock_aliment(
    # corps, parametres de la requete
    aliment_id: int,
    body: StockAlimentUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    aliment = elevage_service.resolve_aliment(db, aliment_id)
    return elevage_service.set_stock_aliment(
        db,
        user=current_user,
        aliment=aliment,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


# ── Consommations d'aliments


@router.post(
    "/consommations-aliments", response_model=ConsommationAlimentResponse, status_code=201
)
def create_consommation_aliment(
    # corps, parametres de la requete
    body: ConsommationAlimentCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.create_consommation_aliment(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get(
    "/consommations-aliments",
    response_model=PaginatedResponse[ConsommationAlimentResponse],
)
def list_consommations_aliments(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    aliment: Optional[int] = Query(None),
    lot: Optional[int] = Query(None),
    annee: Optional[int] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    consommations, total = elevage_service.list_consommations_aliments(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        aliment_id=aliment,
        lot_id=lot,
        annee=annee,
    )
    return pagination.response(consommations, total)


@router.delete("/consommations-aliments/{consommation_id}", status_code=204)
def delete_consommation_aliment(
    consommation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    consommation = get_owned(
        db, ConsommationAliment, consommation_id, current_user, "Consommation"
    )
    elevage_service.delete_consommation_aliment(
        db, user=current_user, consommation=consommation, ip_address=client_ip(request)
    )


# ── Production d'oeufs


@router.post("/production-oeufs", response_model=ProductionOeufsResponse, status_code=201)
def create_production(
    # corps, parametres de la requete
    body: ProductionOeufsCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.create_production(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/production-oeufs", response_model=PaginatedResponse[ProductionOeufsResponse])
def list_productions(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    lot: Optional[int] = Query(None),
    annee: Optional[int] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    productions, total = elevage_service.list_productions(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        lot_id=lot,
        annee=annee,
    )
    return pagination.response(productions, total)


@router.put("/production-oeufs/{production_id}", response_model=ProductionOeufsResponse)
def update_production(
    # corps, parametres de la requete
    production_id: int,
    body: ProductionOeufsUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    production = get_owned(db, ProductionOeufs, production_id, current_user, "Production")
    return elevage_service.update_production(
        db,
        user=current_user,
        production=production,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/production-oeufs/{production_id}", status_code=204)
def delete_production(
    production_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    production = get_owned(db, ProductionOeufs, production_id, current_user, "Production")
    elevage_service.delete_production(
        db, user=current_user, production=production, ip_address=client_ip(request)
    )


# ── Soins


@router.post("/soins", response_model=SoinResponse, status_code=201)
def create_soin(
    # corps, parametres de la requete
    body: SoinCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.create_soin(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/soins", response_model=PaginatedResponse[SoinResponse])
def list_soins(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    animal: Optional[int] = Query(None),
    lot: Optional[int] = Query(None),
    fait: Optional[bool] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    soins, total = elevage_service.list_soins(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        animal_id=animal,
        lot_id=lot,
        fait=fait,
    )
    return pagination.response(soins, total)


@router.put("/soins/{soin_id}", response_model=SoinResponse)
def update_soin(
    # corps, parametres de la requete
    soin_id: int,
    body: SoinUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    soin = get_owned(db, SoinAnimal, soin_id, current_user, "Soin")
    return elevage_service.update_soin(
        db,
        user=current_user,
        soin=soin,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/soins/{soin_id}", status_code=204)
def delete_soin(
    soin_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    soin = get_owned(db, SoinAnimal, soin_id, current_user, "Soin")
    elevage_service.delete_soin(db, user=current_user, soin=soin, ip_address=client_ip(request))


# ── Ventes


@router.post("/ventes", response_model=VenteResponse, status_code=201)
def create_vente(
    # corps, parametres de la requete
    body: VenteCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.create_vente(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("/ventes", response_model=VenteListResponse)
def list_ventes(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    type: Optional[str] = Query(None),
    annee: Optional[int] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ventes, total, montant, par_type = elevage_service.list_ventes(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        type=type,
        annee=annee,
    )
    return VenteListResponse(
        items=ventes,
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=math.ceil(total / pagination.per_page) if total else 0,
        montant_total=montant,
        par_type=par_type,
    )


@router.put("/ventes/{vente_id}", response_model=VenteResponse)
def update_vente(
    # corps, parametres de la requete
    vente_id: int,
    body: VenteUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vente = get_owned(db, VenteProduit, vente_id, current_user, "Vente")
    return elevage_service.update_vente(
        db,
        user=current_user,
        vente=vente,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/ventes/{vente_id}", status_code=204)
def delete_vente(
    vente_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vente = get_owned(db, VenteProduit, vente_id, current_user, "Vente")
    elevage_service.delete_vente(db, user=current_user, vente=vente, ip_address=client_ip(request))


# ── Statistiques


@router.get("/stats", response_model=StatsElevageResponse)
def stats_elevage(
    # corps, parametres de la requete
    annee: Optional[int] = Query(None, ge=2000, le=2100),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return elevage_service.stats_elevage(
        db, user=current_user, annee=annee or date.today().year
    )
