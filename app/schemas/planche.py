"""
Schémas Pydantic des planches : fiche, historique, conseils de rotation,
occupation et analyse du sol
"""

import datetime as dt
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TypePlanche = Literal["Serre", "Plein champ", "Tunnel", "Chassis"]
TypeIrrigation = Literal["Goutte-a-goutte", "Aspersion", "Manuel", "Aucun"]
RetentionEau = Literal["Faible", "Moyenne", "Élevée"]


# ── Schema pour les planches


class PlancheBase(BaseModel):
    rotation_id: Optional[int] = None
    largeur: Optional[float] = Field(default=None, ge=0, le=10)
    longueur: Optional[float] = Field(default=None, ge=0, le=100)
    pos_x: Optional[float] = None
    pos_y: Optional[float] = None
    ilot: Optional[str] = Field(default=None, max_length=100)
    type: Optional[TypePlanche] = None
    irrigation: Optional[TypeIrrigation] = None
    planches_influencees: Optional[str] = None
    type_sol: Optional[str] = Field(default=None, max_length=30)
    retention_eau: Optional[RetentionEau] = None
    argile: Optional[float] = Field(default=None, ge=0, le=100)
    limon: Optional[float] = Field(default=None, ge=0, le=100)
    sable: Optional[float] = Field(default=None, ge=0, le=100)
    ph_sol: Optional[float] = Field(default=None, ge=0, le=14)
    carbone_org: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


# schema d'entree pour la creation
class PlancheCreate(PlancheBase):
    nom: str = Field(min_length=1, max_length=50)


# schema d'entree pour la mise a jour
class PlancheUpdate(PlancheBase):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=50)


# schema de sortie
class PlancheResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    rotation_id: Optional[int]
    largeur: Optional[float]
    longueur: Optional[float]
    surface: Optional[float]
    pos_x: Optional[float]
    pos_y: Optional[float]
    ilot: Optional[str]
    type: Optional[str]
    irrigation: Optional[str]
    planches_influencees: Optional[str]
    type_sol: Optional[str]
    retention_eau: Optional[str]
    argile: Optional[float]
    limon: Optional[float]
    sable: Optional[float]
    ph_sol: Optional[float]
    carbone_org: Optional[float]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


# ── Schema pour l'historique


class RecolteHistorique(BaseModel):
    date: dt.date
    quantite: float


class CultureHistoriqueResponse(BaseModel):
    id: int
    annee: int
    espece_id: str
    variete_id: Optional[str]
    famille_id: Optional[str]
    famille_couleur: Optional[str]
    date_semis: Optional[date]
    date_plantation: Optional[date]
    date_recolte: Optional[date]
    terminee: Optional[str]
    etat: str
    recoltes: list[RecolteHistorique]
    total_recolte: float


class PlancheHistoryResponse(BaseModel):
    planche: str
    cultures: list[CultureHistoriqueResponse]
    annees_disponibles: list[int]


# ── Schema pour les conseils de rotation


class EtatSolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    azote: str
    phosphore: str
    potassium: str
    derniere_culture_gourmande: Optional[int]
    suggestion: str


class FamilleBloqueeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    famille_id: str
    annee_derniere_culture: int
    intervalle: int
    annees_restantes: int
    raison: str
    couleur: Optional[str]


class FamilleRecommandeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    famille_id: str
    score: int
    raison: str
    couleur: Optional[str]


class CultureRecenteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    annee: int
    espece_id: str
    famille_id: Optional[str]
    famille_couleur: Optional[str]


class AvisEspeceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    espece_id: str
    niveau: Literal["safe", "warning", "blocked"]
    message: str
    details: list[str]


class RotationAdviceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    planche: str
    annee: int
    etat_sol: EtatSolResponse
    familles_bloquees: list[FamilleBloqueeResponse]
    familles_recommandees: list[FamilleRecommandeeResponse]
    cultures_recentes: list[CultureRecenteResponse]
    avis_espece: Optional[AvisEspeceResponse] = None


# ── Schema pour l'occupation


# schema d'entree : culture envisagee sur la planche
class OccupationRequest(BaseModel):
    nb_rangs: int = Field(ge=1, le=20)
    espacement_rangs: float = Field(gt=0, le=200)
    longueur: Optional[float] = Field(default=None, ge=0)
    annee: Optional[int] = Field(default=None, ge=2000, le=2100)
    exclure_culture_id: Optional[int] = None


class AjustementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message: str
    reduire_rangs: Optional[int] = None
    reduire_espacement: Optional[int] = None


class OccupationResponse(BaseModel):
    possible: bool
    largeur_planche: float
    largeur_disponible: float
    largeur_necessaire: float
    largeur_occupee: float
    message: Optional[str] = None
    ajustements: list[AjustementResponse] = []


# ── Schema pour le sol


class SolResponse(BaseModel):
    planche: str
    type_sol: Optional[str]
    retention_eau: Optional[str]
    score_retention: Optional[float]
    argile: Optional[float]
    limon: Optional[float]
    sable: Optional[float]
    ph: Optional[float]
    carbone_org: Optional[float]
    frequence: float
    quantite: float
    urgence: float
