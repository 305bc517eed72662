"""
Schémas Pydantic des tâches et du calendrier
"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel

TypeEvenement = Literal["semis", "plantation", "recolte", "irrigation"]


class Evenement(BaseModel):
    # id de la culture, ou de l'irrigation planifiee pour le type irrigation
    id: int
    type: TypeEvenement
    espece_id: str
    variete_id: Optional[str] = None
    planche_id: Optional[int] = None
    planche: Optional[str] = None
    date: dt.date
    fait: bool
    couleur: Optional[str] = None
    culture_id: Optional[int] = None


class CultureSansEau(BaseModel):
    id: int
    espece_id: str
    planche_id: Optional[int]
    ilot: Optional[str]
    derniere_irrigation: Optional[dt.datetime]
    jours_depuis: Optional[int]
    couleur: Optional[str]


class StatsTaches(BaseModel):
    semis_prevus: int
    semis_faits: int
    plantations_prevues: int
    plantations_faites: int
    recoltes_prevues: int
    recoltes_faites: int
    a_irriguer: int


class TachesResponse(BaseModel):
    debut: dt.date
    fin: dt.date
    semis: list[Evenement]
    plantations: list[Evenement]
    recoltes: list[Evenement]
    irrigation: list[CultureSansEau]
    stats: StatsTaches


class StatsCalendrier(BaseModel):
    semis: int
    plantations: int
    recoltes: int
    irrigations: int
    total: int


class CalendrierResponse(BaseModel):
    events: list[Evenement]
    stats: StatsCalendrier
