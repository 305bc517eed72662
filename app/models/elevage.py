"""
Modèles SQLAlchemy de l'élevage
Espèces animales et aliments sont des référentiels globaux, le reste
appartient à l'utilisateur.
"""

import datetime as dt
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class EspeceAnimale(Base):
    """Espèce animale (poule, chèvre...)"""

    __tablename__ = "gleba_especes_animales"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    nom: Mapped[str] = mapped_column(String(100), nullable=False)
    # volaille, mammifere_petit, mammifere_grand
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    # oeufs, viande, lait, laine, mixte
    production: Mapped[str] = mapped_column(String(30), nullable=False)
    duree_gestation: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duree_couvaison: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duree_elevage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    poids_adulte: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ponte_annuelle: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    consommation_jour: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prix_achat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    couleur: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<EspeceAnimale(id={self.id}, type={self.type})>"


class LotAnimaux(Base):
    """Lot d'animaux arrivés ensemble (bande de poules, troupeau)"""

    __tablename__ = "gleba_lots_animaux"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    espece_animale_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("gleba_especes_animales.id"), nullable=False
    )
    nom: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    date_arrivee: Mapped[dt.date] = mapped_column(Date, nullable=False)
    quantite_initiale: Mapped[int] = mapped_column(Integer, nullable=False)
    quantite_actuelle: Mapped[int] = mapped_column(Integer, nullable=False)
    provenance: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    prix_achat_total: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # actif, reforme, vendu, abattu
    statut: Mapped[str] = mapped_column(String(20), default="actif", nullable=False)
    date_reforme: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    espece_animale: Mapped["EspeceAnimale"] = relationship("EspeceAnimale")

    def __repr__(self) -> str:
        return f"<LotAnimaux(id={self.id}, espece={self.espece_animale_id}, statut={self.statut})>"


class Animal(Base):
    """Animal suivi individuellement"""

    __tablename__ = "gleba_animaux"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    espece_animale_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("gleba_especes_animales.id"), nullable=False
    )
    lot_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_lots_animaux.id", ondelete="SET NULL"), nullable=True
    )
    nom: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    identifiant: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    sexe: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    date_naissance: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    date_arrivee: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    provenance: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    prix_achat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # actif, vendu, mort, abattu
    statut: Mapped[str] = mapped_column(String(20), default="actif", nullable=False)
    date_sortie: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    cause_sortie: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    poids: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    espece_animale: Mapped["EspeceAnimale"] = relationship("EspeceAnimale")

    def __repr__(self) -> str:
        return f"<Animal(id={self.id}, nom={self.nom}, statut={self.statut})>"


class Aliment(Base):
    """Aliment pour animaux (référentiel)"""

    __tablename__ = "gleba_aliments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nom: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    unite: Mapped[str] = mapped_column(String(20), default="kg", nullable=False)
    prix_defaut: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Aliment(id={self.id}, nom={self.nom})>"


class StockAliment(Base):
    """Stock d'un aliment chez un utilisateur"""

    __tablename__ = "gleba_stocks_aliments"
    __table_args__ = (
        UniqueConstraint("user_id", "aliment_id", name="uq_stock_user_aliment"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    aliment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_aliments.id", ondelete="CASCADE"), nullable=False
    )
    stock: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    stock_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prix: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow, nullable=False
    )

    aliment: Mapped["Aliment"] = relationship("Aliment")

    def __repr__(self) -> str:
        return f"<StockAliment(user_id={self.user_id}, aliment={self.aliment_id}, stock={self.stock})>"


class ConsommationAliment(Base):
    """Distribution d'aliment à un lot ou un animal"""

    __tablename__ = "gleba_consommations_aliments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    aliment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_aliments.id"), nullable=False
    )
    lot_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_lots_animaux.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    quantite: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    aliment: Mapped["Aliment"] = relationship("Aliment")

    def __repr__(self) -> str:
        return f"<ConsommationAliment(id={self.id}, aliment={self.aliment_id}, quantite={self.quantite})>"


class ProductionOeufs(Base):
    """Ramassage d'oeufs d'un lot ou d'un animal"""

    __tablename__ = "gleba_production_oeufs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    lot_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_lots_animaux.id", ondelete="SET NULL"), nullable=True
    )
    animal_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_animaux.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    quantite: Mapped[int] = mapped_column(Integer, nullable=False)
    casses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sales: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    calibre: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<ProductionOeufs(id={self.id}, date={self.date}, quantite={self.quantite})>"


class SoinAnimal(Base):
    """Soin ou traitement, fait ou prévu"""

    __tablename__ = "gleba_soins_animaux"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    animal_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_animaux.id", ondelete="SET NULL"), nullable=True
    )
    lot_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_lots_animaux.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    produit: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    quantite: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    unite: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    cout: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    veterinaire: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    date_prevue: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    fait: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<SoinAnimal(id={self.id}, type={self.type}, fait={self.fait})>"


class VenteProduit(Base):
    """Vente d'un produit de l'élevage (oeufs, viande, animal vivant...)"""

    __tablename__ = "gleba_ventes_produits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # oeufs, viande, animal_vivant, lait, autre
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    animal_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_animaux.id", ondelete="SET NULL"), nullable=True
    )
    lot_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_lots_animaux.id", ondelete="SET NULL"), nullable=True
    )
    client_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_clients.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quantite: Mapped[float] = mapped_column(Float, nullable=False)
    unite: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    prix_unitaire: Mapped[float] = mapped_column(Float, nullable=False)
    prix_total: Mapped[float] = mapped_column(Float, nullable=False)
    paye: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<VenteProduit(id={self.id}, type={self.type}, prix_total={self.prix_total})>"
