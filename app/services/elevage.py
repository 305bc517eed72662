"""
Service de l'élevage
Les espèces animales et les aliments sont des référentiels globaux ; lots,
animaux, stocks d'aliments, production, soins et ventes appartiennent à
l'utilisateur.
"""

import logging
from datetime import date, timedelta
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from app.dependencies.resolve import check_owned_reference, check_reference
from app.models import (
    Aliment,
    Animal,
    Client,
    ConsommationAliment,
    EspeceAnimale,
    LotAnimaux,
    ProductionOeufs,
    SoinAnimal,
    StockAliment,
    User,
    VenteProduit,
)
from app.services.audit import log_action
from app.services.crud import create_entity, delete_entity, drop_required_nulls, update_entity
from app.utils import round2

logger = logging.getLogger(__name__)

HORIZON_SOINS_JOURS = 30


def _page(db: Session, model, filtres: list, order_by, offset: int, limit: int) -> tuple[list, int]:
    total = db.execute(select(func.count(model.id)).where(*filtres)).scalar_one()
    items = (
        db.execute(select(model).where(*filtres).order_by(*order_by).offset(offset).limit(limit))
        .scalars()
        .all()
    )
    return list(items), total


def _periode(model, annee: Optional[int]) -> list:
    if annee is None:
        return []
    return [model.date >= date(annee, 1, 1), model.date <= date(annee, 12, 31)]


# ── Especes animales


def list_especes_animales(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 50,
    type: Optional[str] = None,
    production: Optional[str] = None,
) -> tuple[list[EspeceAnimale], int]:
    filtres = []
    if type:
        filtres.append(EspeceAnimale.type == type)
    if production:
        filtres.append(EspeceAnimale.production == production)
    return _page(db, EspeceAnimale, filtres, [EspeceAnimale.nom], offset, limit)


def create_espece_animale(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> EspeceAnimale:
    if db.get(EspeceAnimale, data["id"]) is not None:
        raise HTTPException(
            status_code=409, detail=f"L'espèce animale '{data['id']}' existe déjà"
        )
    espece = EspeceAnimale(**data)
    return create_entity(
        db,
        espece,
        resource_type="espece_animale",
        actor_id=user.id,
        ip_address=ip_address,
        details={"type": espece.type, "production": espece.production},
    )


def update_espece_animale(
    db: Session,
    *,
    user: User,
    espece: EspeceAnimale,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> EspeceAnimale:
    return update_entity(
        db, espece, changes, resource_type="espece_animale", actor_id=user.id, ip_address=ip_address
    )


def delete_espece_animale(
    db: Session, *, user: User, espece: EspeceAnimale, ip_address: Optional[str] = None
) -> None:
    """Supprime une espèce animale qu'aucun lot ni animal n'utilise"""
    utilisee = db.execute(
        select(func.count(LotAnimaux.id)).where(LotAnimaux.espece_animale_id == espece.id)
    ).scalar_one() + db.execute(
        select(func.count(Animal.id)).where(Animal.espece_animale_id == espece.id)
    ).scalar_one()
    if utilisee:
        raise HTTPException(
            status_code=409,
            detail=f"L'espèce animale '{espece.id}' est utilisée par {utilisee} lot(s) ou animal(aux)",
        )
    delete_entity(
        db, espece, resource_type="espece_animale", actor_id=user.id, ip_address=ip_address
    )


# ── Lots


def list_lots(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    espece_animale_id: Optional[str] = None,
    statut: Optional[str] = None,
) -> tuple[list[LotAnimaux], int]:
    filtres = [LotAnimaux.user_id == user.id]
    if espece_animale_id:
        filtres.append(LotAnimaux.espece_animale_id == espece_animale_id)
    if statut:
        filtres.append(LotAnimaux.statut == statut)
    return _page(
        db, LotAnimaux, filtres, [LotAnimaux.date_arrivee.desc(), LotAnimaux.id.desc()], offset, limit
    )


def create_lot(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> LotAnimaux:
    """Crée un lot, l'effectif actuel part de l'effectif initial"""
    check_reference(db, EspeceAnimale, data.get("espece_animale_id"), "Espèce animale")
    lot = LotAnimaux(user_id=user.id, quantite_actuelle=data["quantite_initiale"], **data)
    return create_entity(
        db,
        lot,
        resource_type="lot_animaux",
        actor_id=user.id,
        ip_address=ip_address,
        details={"espece_animale_id": lot.espece_animale_id, "quantite": lot.quantite_initiale},
    )


def update_lot(
    db: Session,
    *,
    user: User,
    lot: LotAnimaux,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> LotAnimaux:
    return update_entity(
        db, lot, changes, resource_type="lot_animaux", actor_id=user.id, ip_address=ip_address
    )


def delete_lot(
    db: Session, *, user: User, lot: LotAnimaux, ip_address: Optional[str] = None
) -> None:
    """Supprime un lot en détachant animaux, production, soins, consommations et ventes"""
    for model in (Animal, ProductionOeufs, SoinAnimal, ConsommationAliment, VenteProduit):
        db.execute(update(model).where(model.lot_id == lot.id).values(lot_id=None))
    delete_entity(db, lot, resource_type="lot_animaux", actor_id=user.id, ip_address=ip_address)


# ── Animaux


def list_animaux(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    espece_animale_id: Optional[str] = None,
    lot_id: Optional[int] = None,
    statut: Optional[str] = None,
) -> tuple[list[Animal], int]:
    filtres = [Animal.user_id == user.id]
    if espece_animale_id:
        filtres.append(Animal.espece_animale_id == espece_animale_id)
    if lot_id is not None:
        filtres.append(Animal.lot_id == lot_id)
    if statut:
        filtres.append(Animal.statut == statut)
    return _page(db, Animal, filtres, [Animal.nom, Animal.id], offset, limit)


def create_animal(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Animal:
    check_reference(db, EspeceAnimale, data.get("espece_animale_id"), "Espèce animale")
    check_owned_reference(db, LotAnimaux, data.get("lot_id"), user, "Lot")
    animal = Animal(user_id=user.id, **data)
    return create_entity(
        db,
        animal,
        resource_type="animal",
        actor_id=user.id,
        ip_address=ip_address,
        details={"espece_animale_id": animal.espece_animale_id, "nom": animal.nom},
    )


def update_animal(
    db: Session,
    *,
    user: User,
    animal: Animal,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Animal:
    check_owned_reference(db, LotAnimaux, changes.get("lot_id"), user, "Lot")
    return update_entity(
        db, animal, changes, resource_type="animal", actor_id=user.id, ip_address=ip_address
    )


def delete_animal(
    db: Session, *, user: User, animal: Animal, ip_address: Optional[str] = None
) -> None:
    for model in (ProductionOeufs, SoinAnimal, VenteProduit):
        db.execute(update(model).where(model.animal_id == animal.id).values(animal_id=None))
    delete_entity(db, animal, resource_type="animal", actor_id=user.id, ip_address=ip_address)


# ── Aliments et stocks


def _stock_aliment(db: Session, user: User, aliment_id: int) -> Optional[StockAliment]:
    return db.execute(
        select(StockAliment).where(
            StockAliment.user_id == user.id, StockAliment.aliment_id == aliment_id
        )
    ).scalar_one_or_none()


def _stock_bas(stock: Optional[StockAliment]) -> bool:
    return bool(stock and stock.stock_min is not None and stock.stock <= stock.stock_min)


def aliment_avec_stock(aliment: Aliment, stock: Optional[StockAliment]) -> dict:
    return {
        "id": aliment.id,
        "nom": aliment.nom,
        "type": aliment.type,
        "unite": aliment.unite,
        "prix_defaut": aliment.prix_defaut,
        "description": aliment.description,
        "stock": stock.stock if stock else None,
        "stock_min": stock.stock_min if stock else None,
        "prix": stock.prix if stock else None,
        "stock_bas": _stock_bas(stock),
    }


def list_aliments(db: Session, *, user: User) -> dict:
    """Aliments avec le stock de l'utilisateur et le nombre d'alertes de stock bas"""
    stocks = {
        s.aliment_id: s
        for s in db.execute(select(StockAliment).where(StockAliment.user_id == user.id)).scalars()
    }
    aliments = db.execute(select(Aliment).order_by(Aliment.nom)).scalars().all()
    items = [aliment_avec_stock(a, stocks.get(a.id)) for a in aliments]
    return {"items": items, "stock_bas": sum(1 for i in items if i["stock_bas"])}


def resolve_aliment(db: Session, aliment_id: int) -> Aliment:
    aliment = db.get(Aliment, aliment_id)
    if not aliment:
        raise HTTPException(status_code=404, detail="Aliment introuvable")
    return aliment


def create_aliment(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> dict:
    if db.execute(select(Aliment.id).where(Aliment.nom == data["nom"])).first():
        raise HTTPException(
            status_code=409, detail=f"L'aliment '{data['nom']}' existe déjà"
        )
    aliment = create_entity(
        db,
        Aliment(**data),
        resource_type="aliment",
        actor_id=user.id,
        ip_address=ip_address,
        details={"nom": data["nom"]},
    )
    return aliment_avec_stock(aliment, None)


def update_aliment(
    db: Session,
    *,
    user: User,
    aliment: Aliment,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> dict:
    nom = changes.get("nom")
    if nom and nom != aliment.nom and db.execute(select(Aliment.id).where(Aliment.nom == nom)).first():
        raise HTTPException(status_code=409, detail=f"L'aliment '{nom}' existe déjà")
    update_entity(
        db, aliment, changes, resource_type="aliment", actor_id=user.id, ip_address=ip_address
    )
    return aliment_avec_stock(aliment, _stock_aliment(db, user, aliment.id))


def delete_aliment(
    db: Session, *, user: User, aliment: Aliment, ip_address: Optional[str] = None
) -> None:
    """Supprime un aliment jamais distribué, avec les stocks qui s'y rapportent"""
    utilise = db.execute(
        select(func.count(ConsommationAliment.id)).where(
            ConsommationAliment.aliment_id == aliment.id
        )
    ).scalar_one()
    if utilise:
        raise HTTPException(
            status_code=409,
            detail=f"L'aliment '{aliment.nom}' est utilisé par {utilise} consommation(s)",
        )
    db.execute(delete(StockAliment).where(StockAliment.aliment_id == aliment.id))
    delete_entity(db, aliment, resource_type="aliment", actor_id=user.id, ip_address=ip_address)


def set_stock_aliment(
    db: Session,
    *,
    user: User,
    aliment: Aliment,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> dict:
    """Crée ou met à jour le stock de l'utilisateur pour un aliment"""
    stock = _stock_aliment(db, user, aliment.id)
    if stock is None:
        stock = StockAliment(user_id=user.id, aliment_id=aliment.id, stock=0)
        db.add(stock)
    for field, value in drop_required_nulls(StockAliment, changes).items():
        setattr(stock, field, value)
    db.flush()

    log_action(
        db,
        user_id=user.id,
        action="UPDATE",
        resource_type="stock_aliment",
        resource_id=str(aliment.id),
        details=changes,
        ip_address=ip_address,
    )
    return aliment_avec_stock(aliment, stock)


def _mouvement_stock(db: Session, user: User, aliment_id: int, delta: float) -> None:
    """Ajuste le stock d'aliment, un stock négatif reste permis"""
    stock = _stock_aliment(db, user, aliment_id)
    if stock is None:
        stock = StockAliment(user_id=user.id, aliment_id=aliment_id, stock=0)
        db.add(stock)
    stock.stock = (stock.stock or 0) + delta
    db.flush()


# ── Consommations d'aliments


def list_consommations_aliments(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    aliment_id: Optional[int] = None,
    lot_id: Optional[int] = None,
    annee: Optional[int] = None,
) -> tuple[list[ConsommationAliment], int]:
    filtres = [ConsommationAliment.user_id == user.id] + _periode(ConsommationAliment, annee)
    if aliment_id is not None:
        filtres.append(ConsommationAliment.aliment_id == aliment_id)
    if lot_id is not None:
        filtres.append(ConsommationAliment.lot_id == lot_id)
    return _page(
        db,
        ConsommationAliment,
        filtres,
        [ConsommationAliment.date.desc(), ConsommationAliment.id.desc()],
        offset,
        limit,
    )


def create_consommation_aliment(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> ConsommationAliment:
    """Enregistre une distribution et décrémente le stock dans la même transaction"""
    check_reference(db, Aliment, data.get("aliment_id"), "Aliment")
    check_owned_reference(db, LotAnimaux, data.get("lot_id"), user, "Lot")
    consommation = create_entity(
        db,
        ConsommationAliment(user_id=user.id, **data),
        resource_type="consommation_aliment",
        actor_id=user.id,
        ip_address=ip_address,
        details={"aliment_id": data["aliment_id"], "quantite": data["quantite"]},
    )
    _mouvement_stock(db, user, consommation.aliment_id, -consommation.quantite)
    return consommation


def delete_consommation_aliment(
    db: Session,
    *,
    user: User,
    consommation: ConsommationAliment,
    ip_address: Optional[str] = None,
) -> None:
    """Supprime une distribution et remet la quantité en stock"""
    _mouvement_stock(db, user, consommation.aliment_id, consommation.quantite)
    delete_entity(
        db,
        consommation,
        resource_type="consommation_aliment",
        actor_id=user.id,
        ip_address=ip_address,
    )


# ── Production d'oeufs


def _check_cible(db: Session, user: User, data: dict[str, Any]) -> None:
    check_owned_reference(db, LotAnimaux, data.get("lot_id"), user, "Lot")
    check_owned_reference(db, Animal, data.get("animal_id"), user, "Animal")


def list_productions(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    lot_id: Optional[int] = None,
    annee: Optional[int] = None,
) -> tuple[list[ProductionOeufs], int]:
    filtres = [ProductionOeufs.user_id == user.id] + _periode(ProductionOeufs, annee)
    if lot_id is not None:
        filtres.append(ProductionOeufs.lot_id == lot_id)
    return _page(
        db,
        ProductionOeufs,
        filtres,
        [ProductionOeufs.date.desc(), ProductionOeufs.id.desc()],
        offset,
        limit,
    )


def create_production(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> ProductionOeufs:
    _check_cible(db, user, data)
    production = ProductionOeufs(user_id=user.id, **data)
    return create_entity(
        db,
        production,
        resource_type="production_oeufs",
        actor_id=user.id,
        ip_address=ip_address,
        details={"quantite": production.quantite},
    )


def update_production(
    db: Session,
    *,
    user: User,
    production: ProductionOeufs,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> ProductionOeufs:
    return update_entity(
        db,
        production,
        changes,
        resource_type="production_oeufs",
        actor_id=user.id,
        ip_address=ip_address,
    )


def delete_production(
    db: Session, *, user: User, production: ProductionOeufs, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db, production, resource_type="production_oeufs", actor_id=user.id, ip_address=ip_address
    )


# ── Soins


def list_soins(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    animal_id: Optional[int] = None,
    lot_id: Optional[int] = None,
    fait: Optional[bool] = None,
) -> tuple[list[SoinAnimal], int]:
    filtres = [SoinAnimal.user_id == user.id]
    if animal_id is not None:
        filtres.append(SoinAnimal.animal_id == animal_id)
    if lot_id is not None:
        filtres.append(SoinAnimal.lot_id == lot_id)
    if fait is not None:
        filtres.append(SoinAnimal.fait == fait)
    return _page(db, SoinAnimal, filtres, [SoinAnimal.date.desc(), SoinAnimal.id.desc()], offset, limit)


def create_soin(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> SoinAnimal:
    _check_cible(db, user, data)
    soin = SoinAnimal(user_id=user.id, **data)
    return create_entity(
        db,
        soin,
        resource_type="soin_animal",
        actor_id=user.id,
        ip_address=ip_address,
        details={"type": soin.type, "fait": soin.fait},
    )


def update_soin(
    db: Session,
    *,
    user: User,
    soin: SoinAnimal,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> SoinAnimal:
    return update_entity(
        db, soin, changes, resource_type="soin_animal", actor_id=user.id, ip_address=ip_address
    )


def delete_soin(
    db: Session, *, user: User, soin: SoinAnimal, ip_address: Optional[str] = None
) -> None:
    delete_entity(db, soin, resource_type="soin_animal", actor_id=user.id, ip_address=ip_address)


# ── Ventes de produits


def list_ventes(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    type: Optional[str] = None,
    annee: Optional[int] = None,
) -> tuple[list[VenteProduit], int, float, list[dict]]:
    """Liste paginée des ventes. Retourne (ventes, total, montant, totaux par type)."""
    filtres = [VenteProduit.user_id == user.id] + _periode(VenteProduit, annee)
    if type:
        filtres.append(VenteProduit.type == type)
    ventes, total = _page(
        db, VenteProduit, filtres, [VenteProduit.date.desc(), VenteProduit.id.desc()], offset, limit
    )
    par_type = _ventes_par_type(db, filtres)
    return ventes, total, round2(sum(t["total"] for t in par_type)), par_type


def _ventes_par_type(db: Session, filtres: list) -> list[dict]:
    rows = db.execute(
        select(VenteProduit.type, func.sum(VenteProduit.prix_total), func.count(VenteProduit.id))
        .where(*filtres)
        .group_by(VenteProduit.type)
        .order_by(VenteProduit.type)
    ).all()
    return [{"type": t, "total": round2(total or 0), "count": nb} for t, total, nb in rows]


def create_vente(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> VenteProduit:
    """
    Enregistre une vente, prix total = quantité x prix unitaire

    La vente d'un animal vivant le sort de l'effectif à la date de vente.
    """
    _check_cible(db, user, data)
    check_owned_reference(db, Client, data.get("client_id"), user, "Client")
    vente = VenteProduit(
        user_id=user.id, prix_total=round2(data["quantite"] * data["prix_unitaire"]), **data
    )
    create_entity(
        db,
        vente,
        resource_type="vente_produit",
        actor_id=user.id,
        ip_address=ip_address,
        details={"type": vente.type, "prix_total": vente.prix_total},
    )

    if vente.type == "animal_vivant" and vente.animal_id is not None:
        animal = db.get(Animal, vente.animal_id)
        animal.statut = "vendu"
        animal.date_sortie = vente.date
        animal.cause_sortie = "Vente"
        db.flush()
        logger.info("Animal %s sorti de l'effectif (vente %s)", animal.id, vente.id)
    return vente


def update_vente(
    db: Session,
    *,
    user: User,
    vente: VenteProduit,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> VenteProduit:
    check_owned_reference(db, Client, changes.get("client_id"), user, "Client")
    quantite = changes.get("quantite") or vente.quantite
    prix_unitaire = changes.get("prix_unitaire")
    if prix_unitaire is None:
        prix_unitaire = vente.prix_unitaire
    changes["prix_total"] = round2(quantite * prix_unitaire)
    return update_entity(
        db, vente, changes, resource_type="vente_produit", actor_id=user.id, ip_address=ip_address
    )


def delete_vente(
    db: Session, *, user: User, vente: VenteProduit, ip_address: Optional[str] = None
) -> None:
    delete_entity(db, vente, resource_type="vente_produit", actor_id=user.id, ip_address=ip_address)


# ── Statistiques


def stats_elevage(db: Session, *, user: User, annee: int) -> dict:
    """Effectifs, production, ventes et coûts de l'année"""
    animaux_actifs = db.execute(
        select(func.count(Animal.id)).where(Animal.user_id == user.id, Animal.statut == "actif")
    ).scalar_one()
    lots_actifs, effectif_lots = db.execute(
        select(func.count(LotAnimaux.id), func.coalesce(func.sum(LotAnimaux.quantite_actuelle), 0))
        .where(LotAnimaux.user_id == user.id, LotAnimaux.statut == "actif")
    ).one()

    par_espece = db.execute(
        select(EspeceAnimale.id, EspeceAnimale.nom, EspeceAnimale.couleur, func.count(Animal.id))
        .join(Animal, Animal.espece_animale_id == EspeceAnimale.id)
        .where(Animal.user_id == user.id, Animal.statut == "actif")
        .group_by(EspeceAnimale.id, EspeceAnimale.nom, EspeceAnimale.couleur)
        .order_by(EspeceAnimale.nom)
    ).all()

    oeufs_par_mois = [0] * 12
    productions = db.execute(
        select(ProductionOeufs).where(
            ProductionOeufs.user_id == user.id, *_periode(ProductionOeufs, annee)
        )
    ).scalars()
    for production in productions:
        oeufs_par_mois[production.date.month - 1] += production.quantite

    filtres_ventes = [VenteProduit.user_id == user.id] + _periode(VenteProduit, annee)
    ventes_par_type = _ventes_par_type(db, filtres_ventes)

    soins_a_planifier = db.execute(
        select(func.count(SoinAnimal.id)).where(
            SoinAnimal.user_id == user.id,
            SoinAnimal.fait.is_(False),
            SoinAnimal.date_prevue <= date.today() + timedelta(days=HORIZON_SOINS_JOURS),
        )
    ).scalar_one()
    stocks = db.execute(select(StockAliment).where(StockAliment.user_id == user.id)).scalars()
    aliments_stock_bas = sum(1 for s in stocks if _stock_bas(s))

    return {
        "annee": annee,
        "animaux_actifs": animaux_actifs,
        "lots_actifs": lots_actifs,
        "effectif_lots": effectif_lots,
        "animaux_par_espece": [
            {"espece_animale_id": id_, "nom": nom, "couleur": couleur, "count": nb}
            for id_, nom, couleur, nb in par_espece
        ],
        "oeufs_annee": sum(oeufs_par_mois),
        "oeufs_par_mois": oeufs_par_mois,
        "ventes_annee": round2(sum(t["total"] for t in ventes_par_type)),
        "nb_ventes": sum(t["count"] for t in ventes_par_type),
        "ventes_par_type": ventes_par_type,
        "soins_a_planifier": soins_a_planifier,
        "aliments_stock_bas": aliments_stock_bas,
        "couts": couts_elevage(db, user=user, annee=annee),
    }


def couts_elevage(db: Session, *, user: User, annee: int) -> dict:
    """Coûts de l'année : soins, aliments distribués et achats d'animaux"""
    debut, fin = date(annee, 1, 1), date(annee, 12, 31)

    soins = db.execute(
        select(func.coalesce(func.sum(SoinAnimal.cout), 0)).where(
            SoinAnimal.user_id == user.id, *_periode(SoinAnimal, annee)
        )
    ).scalar_one()

    # prix du stock de l'utilisateur, sinon prix par defaut de l'aliment
    prix = {
        s.aliment_id: s.prix
        for s in db.execute(select(StockAliment).where(StockAliment.user_id == user.id)).scalars()
    }
    aliments = 0.0
    consommations = db.execute(
        select(ConsommationAliment).where(
            ConsommationAliment.user_id == user.id, *_periode(ConsommationAliment, annee)
        )
    ).scalars()
    for consommation in consommations:
        prix_kg = prix.get(consommation.aliment_id)
        if prix_kg is None:
            prix_kg = consommation.aliment.prix_defaut or 0
        aliments += consommation.quantite * prix_kg

    achats_animaux = db.execute(
        select(func.coalesce(func.sum(Animal.prix_achat), 0)).where(
            Animal.user_id == user.id, Animal.date_arrivee >= debut, Animal.date_arrivee <= fin
        )
    ).scalar_one()
    achats_lots = db.execute(
        select(func.coalesce(func.sum(LotAnimaux.prix_achat_total), 0)).where(
            LotAnimaux.user_id == user.id,
            LotAnimaux.date_arrivee >= debut,
            LotAnimaux.date_arrivee <= fin,
        )
    ).scalar_one()

    achats = float(achats_animaux) + float(achats_lots)
    return {
        "soins": round2(float(soins)),
        "aliments": round2(aliments),
        "achats": round2(achats),
        "total": round2(float(soins) + aliments + achats),
    }
