"""
Schémas Pydantic des rotations
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# schema d'une annee du cycle
class RotationDetailIn(BaseModel):
    annee: int = Field(ge=1, le=10)
    itp_id: Optional[str] = None


class RotationDetailResponse(RotationDetailIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


# schema d'entree pour la creation
class RotationCreate(BaseModel):
    nom: str = Field(min_length=1, max_length=100)
    active: bool = True
    nb_annees: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = None
    details: list[RotationDetailIn] = []


# schema d'entree pour la mise a jour (details remplaces en bloc)
class RotationUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=100)
    active: Optional[bool] = None
    nb_annees: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = None
    details: Optional[list[RotationDetailIn]] = None


# schema de sortie
class RotationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    active: bool
    nb_annees: Optional[int]
    notes: Optional[str]
    details: list[RotationDetailResponse]
    created_at: datetime
    updated_at: datetime
