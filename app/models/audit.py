"""
Modèle SQLAlchemy du journal d'audit
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User

# types de ressources tracees, regroupes par module de la ferme
MODULES_RESSOURCES: dict[str, tuple[str, ...]] = {
    "compte": ("user", "api_key"),
    "referentiel": (
        "famille",
        "espece",
        "variete",
        "itp",
        "fournisseur",
        "association",
        "espece_animale",
        "aliment",
    ),
    "potager": ("planche", "rotation", "culture", "recolte", "irrigation", "stock", "consommation"),
    "verger": ("arbre", "recolte_arbre", "operation_arbre"),
    "elevage": (
        "lot_animaux",
        "animal",
        "stock_aliment",
        "consommation_aliment",
        "production_oeufs",
        "soin_animal",
        "vente_produit",
    ),
    "comptabilite": ("client", "facture", "depense_manuelle", "vente_manuelle"),
}


class AuditLog(Base):
    """Action tracée : écriture sur une ressource, connexion ou purge"""

    __tablename__ = "gleba_audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="SET NULL"), nullable=True
    )
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(100), nullable=False)
    # id numerique, nom de referentiel ou email pour un echec de connexion
    resource_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    details: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    user: Mapped[Optional["User"]] = relationship("User")

    @property
    def user_email(self) -> Optional[str]:
        return self.user.email if self.user else None

    @property
    def module(self) -> Optional[str]:
        for module, ressources in MODULES_RESSOURCES.items():
            if self.resource_type in ressources:
                return module
        return None

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, action={self.action}, resource={self.resource_type})>"
