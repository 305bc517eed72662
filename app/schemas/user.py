"""
Schémas Pydantic pour les utilisateurs et API Keys
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils import naive_utc

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ── Schema pour les utilisateurs


# schema d'entree pour la creation
class UserCreate(BaseModel):
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    name: Optional[str] = Field(default=None, max_length=255)
    role: Literal["ADMIN", "USER"] = "USER"
    is_active: bool = True


# schema d'entree pour la mise a jour
class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Literal["ADMIN", "USER"]] = None
    is_active: Optional[bool] = None


# schema de sortie
class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str]
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


# schema de sortie enrichi pour l'administration
class UserAdminResponse(UserResponse):
    nb_cultures: int = 0
    nb_planches: int = 0
    nb_recoltes: int = 0


# ── Schema pour l'authentification


# schema de requete du login
class LoginRequest(BaseModel):
    email: str
    password: str


# schema de reponse du login (cle de session en clair, affichee une seule fois)
class LoginResponse(BaseModel):
    user: UserResponse
    api_key: str
    key_prefix: str
    expires_at: Optional[datetime] = None


# ── Schema pour les API Keys


# schema d'entree pour la creation d'une API Key
class ApiKeyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def expires_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


# schema de sortie pour une API Key
class ApiKeyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key_value: str
    key_prefix: str
    name: str
    expires_at: Optional[datetime]
    is_active: bool
    created_at: datetime


# ── Schema pour la suppression des donnees


class DeleteDataResponse(BaseModel):
    message: str
    details: dict[str, int]
