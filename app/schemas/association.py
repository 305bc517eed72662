"""
Schémas Pydantic des associations de cultures
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# schema d'un membre de l'association (une espece ou une famille)
class AssociationDetailIn(BaseModel):
    espece_id: Optional[str] = None
    famille_id: Optional[str] = None
    groupe: Optional[str] = Field(default=None, max_length=100)
    requise: bool = False
    notes: Optional[str] = None

    @model_validator(mode="after")
    def une_seule_cible(self):
        if bool(self.espece_id) == bool(self.famille_id):
            raise ValueError("Indiquer soit une espèce soit une famille")
        return self


class AssociationDetailResponse(AssociationDetailIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


# schema d'entree pour la creation
class AssociationCreate(BaseModel):
    nom: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    notes: Optional[str] = None
    details: list[AssociationDetailIn] = []


# schema d'entree pour la mise a jour (details remplaces en bloc)
class AssociationUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    notes: Optional[str] = None
    details: Optional[list[AssociationDetailIn]] = None


# schema de sortie
class AssociationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    description: Optional[str]
    notes: Optional[str]
    details: list[AssociationDetailResponse]
    created_at: datetime
