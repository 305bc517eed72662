"""
Schémas Pydantic des cultures, récoltes et irrigations
"""

import datetime as dt
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.utils import naive_utc

Terminee = Literal["x", "v", "NS"]


# ── Schema pour les cultures


class CultureBase(BaseModel):
    variete_id: Optional[str] = None
    itp_id: Optional[str] = None
    planche_id: Optional[int] = None
    annee: Optional[int] = Field(default=None, ge=2000, le=2100)
    date_semis: Optional[date] = None
    date_plantation: Optional[date] = None
    date_recolte: Optional[date] = None
    fin_recolte: Optional[date] = None
    semis_fait: bool = False
    plantation_faite: bool = False
    recolte_faite: bool = False
    terminee: Optional[Terminee] = None
    quantite: Optional[float] = Field(default=None, ge=0)
    nb_rangs: Optional[int] = Field(default=None, ge=1, le=20)
    longueur: Optional[float] = Field(default=None, ge=0, le=100)
    espacement: Optional[int] = Field(default=None, ge=1, le=200)
    espacement_rangs: Optional[int] = Field(default=None, ge=1, le=200)
    a_irriguer: bool = False
    derniere_irrigation: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("derniere_irrigation")
    @classmethod
    def derniere_irrigation_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


# schema d'entree pour la creation
class CultureCreate(CultureBase):
    espece_id: str = Field(min_length=1)


# schema d'entree pour la mise a jour
class CultureUpdate(BaseModel):
    espece_id: Optional[str] = Field(default=None, min_length=1)
    variete_id: Optional[str] = None
    itp_id: Optional[str] = None
    planche_id: Optional[int] = None
    annee: Optional[int] = Field(default=None, ge=2000, le=2100)
    date_semis: Optional[date] = None
    date_plantation: Optional[date] = None
    date_recolte: Optional[date] = None
    fin_recolte: Optional[date] = None
    semis_fait: Optional[bool] = None
    plantation_faite: Optional[bool] = None
    recolte_faite: Optional[bool] = None
    terminee: Optional[Terminee] = None
    quantite: Optional[float] = Field(default=None, ge=0)
    nb_rangs: Optional[int] = Field(default=None, ge=1, le=20)
    longueur: Optional[float] = Field(default=None, ge=0, le=100)
    espacement: Optional[int] = Field(default=None, ge=1, le=200)
    espacement_rangs: Optional[int] = Field(default=None, ge=1, le=200)
    a_irriguer: Optional[bool] = None
    derniere_irrigation: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("derniere_irrigation")
    @classmethod
    def derniere_irrigation_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


# schema de sortie, etat et type sont calcules
class CultureResponse(CultureBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    espece_id: str
    terminee: Optional[str] = None
    etat: str
    type: str
    avertissements: list[str] = []
    created_at: datetime
    updated_at: datetime


# ── Schema pour les cultures a irriguer


class CultureAIrriguer(BaseModel):
    id: int
    espece_id: str
    variete_id: Optional[str]
    couleur: Optional[str]
    planche_id: Optional[int]
    planche: Optional[str]
    ilot: Optional[str]
    irrigation: Optional[str]
    a_irriguer: bool
    derniere_irrigation: Optional[datetime]
    jours_sans_eau: Optional[int]
    age_jours: Optional[int]
    jeune: bool
    urgence: str
    consommation_eau_semaine: float
    alerte_secheresse: bool
    prochaines_irrigations: int


class StatsIrrigation(BaseModel):
    total: int
    nb_ilots: int
    critique: int
    haute: int
    moyenne: int
    faible: int
    jamais_arrose: int
    alertes_secheresse: int
    prochaines_irrigations_7j: int
    consommation_totale_estimee: float


class CulturesAIrriguerResponse(BaseModel):
    annee: int
    cultures: list[CultureAIrriguer]
    par_ilot: dict[str, list[CultureAIrriguer]]
    par_type_irrigation: dict[str, list[CultureAIrriguer]]
    stats: StatsIrrigation


# schema d'entree : arroser maintenant ou basculer a_irriguer
class IrriguerAction(BaseModel):
    action: Literal["arroser", "basculer"]
    culture_id: Optional[int] = None
    culture_ids: Optional[list[int]] = None

    @model_validator(mode="after")
    def au_moins_une_culture(self):
        if self.culture_id is None and not self.culture_ids:
            raise ValueError("ID de culture requis")
        return self


class IrriguerResultat(BaseModel):
    action: str
    modifiees: int
    date: Optional[dt.datetime] = None


# ── Schema pour les recoltes


class RecolteBase(BaseModel):
    espece_id: str = Field(min_length=1)
    culture_id: Optional[int] = None
    date: dt.date
    quantite: float = Field(ge=0)
    date_peremption: Optional[dt.date] = None
    notes: Optional[str] = None


# schema d'entree pour la creation
class RecolteCreate(RecolteBase):
    pass


# schema d'entree pour la mise a jour
class RecolteUpdate(BaseModel):
    espece_id: Optional[str] = Field(default=None, min_length=1)
    culture_id: Optional[int] = None
    date: Optional[dt.date] = None
    quantite: Optional[float] = Field(default=None, ge=0)
    date_peremption: Optional[dt.date] = None
    notes: Optional[str] = None


# schema de sortie
class RecolteResponse(RecolteBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


class RecolteListResponse(BaseModel):
    items: list[RecolteResponse]
    total: int
    page: int
    per_page: int
    pages: int
    total_quantite: float


# ── Schema pour les irrigations planifiees


# schema d'entree pour la creation
class IrrigationCreate(BaseModel):
    culture_id: int
    date_prevue: date
    fait: bool = False
    date_effective: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("date_effective")
    @classmethod
    def date_effective_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


# schema d'entree pour la mise a jour
class IrrigationUpdate(BaseModel):
    date_prevue: Optional[date] = None
    fait: Optional[bool] = None
    date_effective: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("date_effective")
    @classmethod
    def date_effective_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


# schema de sortie
class IrrigationResponse(IrrigationCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


# schema d'entree du generateur
class GenererIrrigations(BaseModel):
    annee: int = Field(ge=2000, le=2100)
    force: bool = False


class GenererIrrigationsResponse(BaseModel):
    cultures_traitees: int
    cultures_ignorees: int
    irrigations_creees: int
