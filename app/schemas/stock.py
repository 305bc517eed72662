"""
Schémas Pydantic des stocks et consommations
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Schema pour les stocks


class StockDetail(BaseModel):
    inventaire: float
    recoltes: float
    consommations: float


class StockResponse(BaseModel):
    espece_id: str
    couleur: Optional[str]
    date_inventaire: Optional[dt.date]
    stock_net: float
    detail: StockDetail


# schema d'entree de l'inventaire
class StockUpdate(BaseModel):
    inventaire: float = Field(ge=0)
    date_inventaire: Optional[dt.date] = None


# ── Schema pour les consommations


class ConsommationBase(BaseModel):
    espece_id: str = Field(min_length=1)
    date: dt.date
    quantite: float = Field(gt=0)
    prix: Optional[float] = Field(default=None, ge=0)
    destination: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None


# schema d'entree pour la creation
class ConsommationCreate(ConsommationBase):
    pass


# schema d'entree pour la mise a jour
class ConsommationUpdate(BaseModel):
    espece_id: Optional[str] = Field(default=None, min_length=1)
    date: Optional[dt.date] = None
    quantite: Optional[float] = Field(default=None, gt=0)
    prix: Optional[float] = Field(default=None, ge=0)
    destination: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None


# schema de sortie
class ConsommationResponse(ConsommationBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime
