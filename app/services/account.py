"""
Service de suppression des données d'un utilisateur
"""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.comptabilite import (
    Client,
    DepenseManuelle,
    Facture,
    LigneFacture,
    VenteManuelle,
)
from app.models.elevage import (
    Animal,
    ConsommationAliment,
    LotAnimaux,
    ProductionOeufs,
    SoinAnimal,
    StockAliment,
    VenteProduit,
)
from app.models.jardin import (
    Consommation,
    Culture,
    IrrigationPlanifiee,
    Planche,
    Recolte,
    Rotation,
    RotationDetail,
    StockEspece,
)
from app.models.verger import Arbre, OperationArbre, RecolteArbre
from app.services.audit import log_action

logger = logging.getLogger(__name__)

# ordre imposé par les clés étrangères : les dépendants d'abord
_TABLES_UTILISATEUR = [
    ("irrigations", IrrigationPlanifiee),
    ("recoltes", Recolte),
    ("consommations", Consommation),
    ("stocks", StockEspece),
    ("cultures", Culture),
    ("planches", Planche),
    ("consommations_aliments", ConsommationAliment),
    ("production_oeufs", ProductionOeufs),
    ("soins", SoinAnimal),
    ("ventes_produits", VenteProduit),
    ("animaux", Animal),
    ("lots", LotAnimaux),
    ("stocks_aliments", StockAliment),
    ("recoltes_arbres", RecolteArbre),
    ("operations_arbres", OperationArbre),
    ("arbres", Arbre),
    ("ventes_manuelles", VenteManuelle),
    ("depenses_manuelles", DepenseManuelle),
]


def purge_user_data(db: Session, *, user_id: int) -> dict[str, int]:
    """Supprime toutes les données d'exploitation d'un utilisateur.
    Retourne le nombre de lignes supprimées par table.
    """
    counts: dict[str, int] = {}
    for label, model in _TABLES_UTILISATEUR:
        result = db.execute(delete(model).where(model.user_id == user_id))
        counts[label] = result.rowcount

    # tables enfants sans user_id
    rotations = select(Rotation.id).where(Rotation.user_id == user_id)
    db.execute(delete(RotationDetail).where(RotationDetail.rotation_id.in_(rotations)))
    counts["rotations"] = db.execute(
        delete(Rotation).where(Rotation.user_id == user_id)
    ).rowcount

    factures = select(Facture.id).where(Facture.user_id == user_id)
    db.execute(delete(LigneFacture).where(LigneFacture.facture_id.in_(factures)))
    counts["factures"] = db.execute(
        delete(Facture).where(Facture.user_id == user_id)
    ).rowcount
    counts["clients"] = db.execute(
        delete(Client).where(Client.user_id == user_id)
    ).rowcount

    # les objets deja charges dans la session ne doivent plus etre utilises
    db.expire_all()
    return counts


def delete_user_data(
    db: Session,
    *,
    user_id: int,
    ip_address: Optional[str] = None,
) -> tuple[int, dict[str, int]]:
    """Suppression demandée par l'utilisateur lui-même. Retourne (total, détail)."""
    counts = purge_user_data(db, user_id=user_id)
    total = sum(counts.values())

    log_action(
        db,
        user_id=user_id,
        action="DELETE_DATA",
        resource_type="user",
        resource_id=str(user_id),
        details=counts,
        ip_address=ip_address,
    )
    logger.info("Données de l'utilisateur %s supprimées (%s lignes)", user_id, total)
    return total, counts
