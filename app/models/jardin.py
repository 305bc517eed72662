"""
Modèles SQLAlchemy du potager, propres à chaque utilisateur
Rotations, planches, cultures, récoltes, irrigations, consommations et stocks
"""

import datetime as dt
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
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.agronomie.calendrier import etat_culture, type_culture

from .base import Base
from .referentiel import Espece, Itp, Variete


class Rotation(Base):
    """Plan de rotation pluriannuel d'un utilisateur"""

    __tablename__ = "gleba_rotations"
    __table_args__ = (UniqueConstraint("user_id", "nom", name="uq_rotation_user_nom"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    nom: Mapped[str] = mapped_column(String(100), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    nb_annees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    details: Mapped[list["RotationDetail"]] = relationship(
        "RotationDetail",
        back_populates="rotation",
        cascade="all, delete-orphan",
        order_by="RotationDetail.annee",
    )

    def __repr__(self) -> str:
        return f"<Rotation(id={self.id}, nom={self.nom}, user_id={self.user_id})>"


class RotationDetail(Base):
    """Année d'une rotation : quel ITP cultiver cette année-là du cycle"""

    __tablename__ = "gleba_rotation_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rotation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_rotations.id", ondelete="CASCADE"), nullable=False
    )
    annee: Mapped[int] = mapped_column(Integer, nullable=False)
    itp_id: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("gleba_itps.id", ondelete="SET NULL"), nullable=True
    )

    rotation: Mapped["Rotation"] = relationship("Rotation", back_populates="details")
    itp: Mapped[Optional["Itp"]] = relationship("Itp")

    def __repr__(self) -> str:
        return f"<RotationDetail(rotation={self.rotation_id}, annee={self.annee}, itp={self.itp_id})>"


class Planche(Base):
    """Planche de culture"""

    __tablename__ = "gleba_planches"
    __table_args__ = (UniqueConstraint("user_id", "nom", name="uq_planche_user_nom"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    nom: Mapped[str] = mapped_column(String(50), nullable=False)
    rotation_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_rotations.id", ondelete="SET NULL"), nullable=True
    )
    largeur: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longueur: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    surface: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    pos_x: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    pos_y: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ilot: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    irrigation: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    planches_influencees: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type_sol: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    retention_eau: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    argile: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    limon: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    sable: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ph_sol: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    carbone_org: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    rotation: Mapped[Optional["Rotation"]] = relationship("Rotation")

    def __repr__(self) -> str:
        return f"<Planche(id={self.id}, nom={self.nom}, user_id={self.user_id})>"


class Culture(Base):
    """Culture d'une espèce sur une planche pour une année"""

    __tablename__ = "gleba_cultures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    espece_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("gleba_especes.id"), nullable=False
    )
    variete_id: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("gleba_varietes.id", ondelete="SET NULL"), nullable=True
    )
    itp_id: Mapped[Optional[str]] = mapped_column(
        String(100), ForeignKey("gleba_itps.id", ondelete="SET NULL"), nullable=True
    )
    planche_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_planches.id", ondelete="SET NULL"), nullable=True
    )
    annee: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    date_semis: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    date_plantation: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    date_recolte: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    fin_recolte: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    semis_fait: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    plantation_faite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    recolte_faite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # x = terminee, v = vivace, NS = non significative
    terminee: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    quantite: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    nb_rangs: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    longueur: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    espacement: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    espacement_rangs: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    a_irriguer: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    derniere_irrigation: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    espece: Mapped["Espece"] = relationship("Espece")
    variete: Mapped[Optional["Variete"]] = relationship("Variete")
    itp: Mapped[Optional["Itp"]] = relationship("Itp")
    planche: Mapped[Optional["Planche"]] = relationship("Planche")
    recoltes: Mapped[list["Recolte"]] = relationship(
        "Recolte", back_populates="culture", order_by="Recolte.date.desc()"
    )

    @property
    def etat(self) -> str:
        return etat_culture(
            self.terminee, self.semis_fait, self.plantation_faite, self.recolte_faite
        )

    @property
    def type(self) -> str:
        vivace = bool(self.espece and self.espece.vivace)
        return type_culture(
            vivace, self.date_semis, self.date_plantation, self.date_recolte
        )

    def __repr__(self) -> str:
        return f"<Culture(id={self.id}, espece={self.espece_id}, annee={self.annee})>"


class Recolte(Base):
    """Récolte d'une espèce, rattachée ou non à une culture"""

    __tablename__ = "gleba_recoltes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    espece_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("gleba_especes.id"), nullable=False
    )
    culture_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("gleba_cultures.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    quantite: Mapped[float] = mapped_column(Float, nullable=False)
    date_peremption: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    culture: Mapped[Optional["Culture"]] = relationship(
        "Culture", back_populates="recoltes"
    )

    def __repr__(self) -> str:
        return f"<Recolte(id={self.id}, espece={self.espece_id}, quantite={self.quantite})>"


class IrrigationPlanifiee(Base):
    """Arrosage prévu pour une culture"""

    __tablename__ = "gleba_irrigations_planifiees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    culture_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_cultures.id", ondelete="CASCADE"), nullable=False
    )
    date_prevue: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    fait: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    date_effective: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    culture: Mapped["Culture"] = relationship("Culture")

    def __repr__(self) -> str:
        return f"<IrrigationPlanifiee(id={self.id}, culture={self.culture_id}, date={self.date_prevue})>"


class Consommation(Base):
    """Sortie de stock d'une espèce (consommée, donnée, vendue)"""

    __tablename__ = "gleba_consommations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    espece_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("gleba_especes.id"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    quantite: Mapped[float] = mapped_column(Float, nullable=False)
    prix: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    destination: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Consommation(id={self.id}, espece={self.espece_id}, quantite={self.quantite})>"


class StockEspece(Base):
    """Inventaire de départ d'une espèce pour un utilisateur"""

    __tablename__ = "gleba_stocks_especes"
    __table_args__ = (
        UniqueConstraint("user_id", "espece_id", name="uq_stock_user_espece"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gleba_users.id", ondelete="CASCADE"), nullable=False
    )
    espece_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("gleba_especes.id", ondelete="CASCADE"), nullable=False
    )
    inventaire: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    date_inventaire: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<StockEspece(user_id={self.user_id}, espece={self.espece_id}, inventaire={self.inventaire})>"
