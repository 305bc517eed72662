"""
Schémas Pydantic du tableau de bord
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class DashboardStats(BaseModel):
    cultures_total: int
    cultures_actives: int
    planches: int
    surface_totale: float
    especes: int
    arbres: int
    recoltes_annee: float
    recoltes_count: int
    recoltes_annee_precedente: float


class RecolteMois(BaseModel):
    mois: str
    quantite: float


class RecolteEspece(BaseModel):
    espece: str
    quantite: float
    couleur: str


class CulturesFamille(BaseModel):
    famille: str
    count: int
    couleur: str


class EtatCultures(BaseModel):
    en_cours: int
    terminees: int
    total: int


class RendementPlanche(BaseModel):
    planche: str
    total_kg: float
    surface: float
    rendement: float


class DashboardCharts(BaseModel):
    recoltes_mensuelles: list[RecolteMois]
    recoltes_par_espece: list[RecolteEspece]
    cultures_par_famille: list[CulturesFamille]
    etat_cultures: EtatCultures
    rendement_par_planche: list[RendementPlanche]


class TacheAVenir(BaseModel):
    culture_id: int
    espece_id: str
    planche: Optional[str]
    action: str
    date: dt.date


class DashboardResponse(BaseModel):
    annee: int
    stats: DashboardStats
    charts: DashboardCharts
    upcoming: list[TacheAVenir]
