"""
Module models pour gleba
Re-exporte tous les modèles pour que les métadonnées soient complètes
"""

from .base import Base
from .user import ApiKey, User, ROLE_ADMIN, ROLE_USER
from .audit import AuditLog
from .referentiel import (
    Association,
    AssociationDetail,
    Espece,
    Famille,
    Fournisseur,
    Itp,
    Variete,
)
from .jardin import (
    Consommation,
    Culture,
    IrrigationPlanifiee,
    Planche,
    Recolte,
    Rotation,
    RotationDetail,
    StockEspece,
)
from .comptabilite import (
    Client,
    DepenseManuelle,
    Facture,
    LigneFacture,
    VenteManuelle,
)
from .elevage import (
    Aliment,
    Animal,
    ConsommationAliment,
    EspeceAnimale,
    LotAnimaux,
    ProductionOeufs,
    SoinAnimal,
    StockAliment,
    VenteProduit,
)
from .verger import Arbre, OperationArbre, RecolteArbre

__all__ = [
    # Base
    "Base",
    # Utilisateurs, clés API et audit
    "User",
    "ApiKey",
    "ROLE_ADMIN",
    "ROLE_USER",
    "AuditLog",
    # Référentiels
    "Famille",
    "Espece",
    "Variete",
    "Itp",
    "Fournisseur",
    "Association",
    "AssociationDetail",
    # Potager
    "Rotation",
    "RotationDetail",
    "Planche",
    "Culture",
    "Recolte",
    "IrrigationPlanifiee",
    "Consommation",
    "StockEspece",
    # Comptabilité
    "Client",
    "Facture",
    "LigneFacture",
    "DepenseManuelle",
    "VenteManuelle",
    # Élevage
    "EspeceAnimale",
    "LotAnimaux",
    "Animal",
    "Aliment",
    "StockAliment",
    "ConsommationAliment",
    "ProductionOeufs",
    "SoinAnimal",
    "VenteProduit",
    # Verger
    "Arbre",
    "RecolteArbre",
    "OperationArbre",
]
