"""
Modèles SQLAlchemy de la comptabilité : clients, factures, ventes et dépenses
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


class Client(Base):
    """Client de l'exploitation"""

    __tablename__ = "gleba_clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    nom: Mapped[str] = mapped_column(String(200), nullable=False)
    # particulier, professionnel, association
    type: Mapped[str] = mapped_column(String(30), default="particulier", nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    telephone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    adresse: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    code_postal: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    ville: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    pays: Mapped[str] = mapped_column(String(100), default="France", nullable=False)
    siret: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    tva_intra: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    conditions_paiement: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    exonerer_tva: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    actif: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, nom={self.nom})>"


class Facture(Base):
    """Facture ou avoir émis à un client"""

    __tablename__ = "gleba_factures"
    __table_args__ = (
        UniqueConstraint("user_id", "numero", name="uq_facture_user_numero"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    numero: Mapped[str] = mapped_column(String(30), nullable=False)
    # facture, avoir
    type: Mapped[str] = mapped_column(String(20), default="facture", nullable=False)
    client_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_clients.id", ondelete="SET NULL"), nullable=True
    )
    client_nom: Mapped[str] = mapped_column(String(200), nullable=False)
    client_adresse: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    date_echeance: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    date_paiement: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    # brouillon, emise, payee, annulee
    statut: Mapped[str] = mapped_column(String(20), default="brouillon", nullable=False)
    montant_ht: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    montant_tva: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    montant_ttc: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow, nullable=False
    )

    lignes: Mapped[list["LigneFacture"]] = relationship(
        "LigneFacture",
        back_populates="facture",
        cascade="all, delete-orphan",
        order_by="LigneFacture.ordre",
    )

    def __repr__(self) -> str:
        return f"<Facture(id={self.id}, numero={self.numero}, statut={self.statut})>"


class LigneFacture(Base):
    """Ligne d'une facture"""

    __tablename__ = "gleba_lignes_factures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    facture_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_factures.id", ondelete="CASCADE"), nullable=False
    )
    ordre: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    quantite: Mapped[float] = mapped_column(Float, nullable=False)
    unite: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    prix_unitaire: Mapped[float] = mapped_column(Float, nullable=False)
    taux_tva: Mapped[float] = mapped_column(Float, default=5.5, nullable=False)
    montant_ht: Mapped[float] = mapped_column(Float, nullable=False)
    montant_tva: Mapped[float] = mapped_column(Float, nullable=False)
    montant_ttc: Mapped[float] = mapped_column(Float, nullable=False)

    facture: Mapped["Facture"] = relationship("Facture", back_populates="lignes")

    def __repr__(self) -> str:
        return f"<LigneFacture(facture={self.facture_id}, ordre={self.ordre})>"


class DepenseManuelle(Base):
    """Dépense saisie à la main (achat, charge)"""

    __tablename__ = "gleba_depenses_manuelles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    categorie: Mapped[str] = mapped_column(String(100), nullable=False)
    module: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    fournisseur: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    ref_facture: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    montant: Mapped[float] = mapped_column(Float, nullable=False)
    taux_tva: Mapped[float] = mapped_column(Float, default=20, nullable=False)
    montant_ht: Mapped[float] = mapped_column(Float, nullable=False)
    montant_tva: Mapped[float] = mapped_column(Float, nullable=False)
    paye: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    date_echeance: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<DepenseManuelle(id={self.id}, categorie={self.categorie}, montant={self.montant})>"


class VenteManuelle(Base):
    """Vente saisie à la main (marché, panier...)"""

    __tablename__ = "gleba_ventes_manuelles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    categorie: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quantite: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    unite: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    prix_unitaire: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    montant: Mapped[float] = mapped_column(Float, nullable=False)
    taux_tva: Mapped[float] = mapped_column(Float, default=5.5, nullable=False)
    montant_ht: Mapped[float] = mapped_column(Float, nullable=False)
    montant_tva: Mapped[float] = mapped_column(Float, nullable=False)
    client_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_clients.id", ondelete="SET NULL"), nullable=True
    )
    client_nom: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    module: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    paye: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<VenteManuelle(id={self.id}, categorie={self.categorie}, montant={self.montant})>"
