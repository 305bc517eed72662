"""
Modèles SQLAlchemy des référentiels globaux du potager
Familles botaniques, espèces, variétés, itinéraires techniques, fournisseurs
et associations de cultures. Partagés par tous les utilisateurs.
"""

from datetime import date, datetime
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
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Famille(Base):
    """Famille botanique, porte l'intervalle de retour en rotation"""

    __tablename__ = "gleba_familles"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    intervalle: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    couleur: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    especes: Mapped[list["Espece"]] = relationship("Espece", back_populates="famille")

    def __repr__(self) -> str:
        return f"<Famille(id={self.id}, intervalle={self.intervalle})>"


class Espece(Base):
    """Espèce cultivée (tomate, carotte...)"""

    __tablename__ = "gleba_especes"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    famille_id: Mapped[Optional[str]] = mapped_column(
        String(100),
        ForeignKey("gleba_familles.id", ondelete="SET NULL"),
        nullable=True,
    )
    nom_latin: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    rendement: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    vivace: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    besoin_n: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    besoin_p: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    besoin_k: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    besoin_eau: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    a_planifier: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    couleur: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date_inventaire: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    inventaire: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    famille: Mapped[Optional["Famille"]] = relationship(
        "Famille", back_populates="especes"
    )

    def __repr__(self) -> str:
        return f"<Espece(id={self.id}, famille={self.famille_id})>"


class Fournisseur(Base):
    """Fournisseur de semences, plants ou fournitures"""

    __tablename__ = "gleba_fournisseurs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nom: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    contact: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    telephone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    adresse: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    site_web: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Fournisseur(id={self.id}, nom={self.nom})>"


class Variete(Base):
    """Variété d'une espèce, porte le stock de graines et de plants"""

    __tablename__ = "gleba_varietes"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    espece_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("gleba_especes.id", ondelete="CASCADE"), nullable=False
    )
    fournisseur_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_fournisseurs.id", ondelete="SET NULL"), nullable=True
    )
    semaine_recolte: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duree_recolte: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    nb_graines_g: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prix_graine: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    stock_graines: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    stock_plants: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    date_stock: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    bio: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    espece: Mapped["Espece"] = relationship("Espece")

    def __repr__(self) -> str:
        return f"<Variete(id={self.id}, espece={self.espece_id})>"


class Itp(Base):
    """Itinéraire technique : calendrier type et densité d'une culture"""

    __tablename__ = "gleba_itps"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    espece_id: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("gleba_especes.id", ondelete="SET NULL"), nullable=True
    )
    semaine_semis: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    semaine_plantation: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    semaine_recolte: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duree_pepiniere: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duree_culture: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    nb_rangs: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    espacement: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    espacement_rangs: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    espece: Mapped[Optional["Espece"]] = relationship("Espece")

    def __repr__(self) -> str:
        return f"<Itp(id={self.id}, espece={self.espece_id})>"


class Association(Base):
    """Association de cultures (compagnonnage)"""

    __tablename__ = "gleba_associations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nom: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    details: Mapped[list["AssociationDetail"]] = relationship(
        "AssociationDetail",
        back_populates="association",
        cascade="all, delete-orphan",
        order_by="AssociationDetail.id",
    )

    def __repr__(self) -> str:
        return f"<Association(id={self.id}, nom={self.nom})>"


class AssociationDetail(Base):
    """Membre d'une association : une espèce ou une famille entière"""

    __tablename__ = "gleba_association_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    association_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_associations.id", ondelete="CASCADE"), nullable=False
    )
    espece_id: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("gleba_especes.id", ondelete="CASCADE"), nullable=True
    )
    famille_id: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("gleba_familles.id", ondelete="CASCADE"), nullable=True
    )
    groupe: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    requise: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    association: Mapped["Association"] = relationship(
        "Association", back_populates="details"
    )

    def __repr__(self) -> str:
        cible = self.espece_id or self.famille_id
        return f"<AssociationDetail(association={self.association_id}, cible={cible})>"
