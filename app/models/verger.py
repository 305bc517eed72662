"""
Modèles SQLAlchemy du verger : arbres, récoltes et opérations
"""

import datetime as dt
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Arbre(Base):
    """Arbre ou arbuste de l'exploitation"""

    __tablename__ = "gleba_arbres"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    nom: Mapped[str] = mapped_column(String(100), nullable=False)
    # fruitier, petit_fruit, ornement, haie
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    espece: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    variete: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    porte_greffe: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    fournisseur: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    date_achat: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    prix_achat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    date_plantation: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    pos_x: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    pos_y: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    envergure: Mapped[float] = mapped_column(Float, default=2, nullable=False)
    etat: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    pollinisateur: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    productif: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    rendement_moyen: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Arbre(id={self.id}, nom={self.nom}, type={self.type})>"


class RecolteArbre(Base):
    """Récolte sur un arbre"""

    __tablename__ = "gleba_recoltes_arbres"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    arbre_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_arbres.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    quantite: Mapped[float] = mapped_column(Float, nullable=False)
    qualite: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    # en_stock, vendu, consomme, perdu
    statut: Mapped[str] = mapped_column(String(20), default="en_stock", nullable=False)
    prix_kg: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<RecolteArbre(id={self.id}, arbre={self.arbre_id}, quantite={self.quantite})>"


class OperationArbre(Base):
    """Opération d'entretien sur un arbre (taille, traitement...)"""

    __tablename__ = "gleba_operations_arbres"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    arbre_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_arbres.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    date_prevue: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    fait: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    produit: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    cout: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<OperationArbre(id={self.id}, arbre={self.arbre_id}, type={self.type})>"
