"""
Schémas Pydantic des référentiels : familles, espèces, variétés, ITP, fournisseurs
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

COULEUR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# ── Schema pour les familles


# schema d'entree pour la creation
class FamilleCreate(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    intervalle: int = Field(default=4, ge=0, le=10)
    couleur: Optional[str] = Field(default=None, pattern=COULEUR_PATTERN)
    description: Optional[str] = None


# schema d'entree pour la mise a jour
class FamilleUpdate(BaseModel):
    intervalle: Optional[int] = Field(default=None, ge=0, le=10)
    couleur: Optional[str] = Field(default=None, pattern=COULEUR_PATTERN)
    description: Optional[str] = None


# schema de sortie
class FamilleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    intervalle: int
    couleur: Optional[str]
    description: Optional[str]
    nb_especes: int = 0


# ── Schema pour les especes


class EspeceBase(BaseModel):
    famille_id: Optional[str] = None
    nom_latin: Optional[str] = Field(default=None, max_length=200)
    rendement: Optional[float] = Field(default=None, ge=0, le=100)
    vivace: bool = False
    besoin_n: Optional[int] = Field(default=None, ge=0, le=5)
    besoin_p: Optional[int] = Field(default=None, ge=0, le=5)
    besoin_k: Optional[int] = Field(default=None, ge=0, le=5)
    besoin_eau: Optional[int] = Field(default=None, ge=0, le=5)
    a_planifier: bool = True
    couleur: Optional[str] = Field(default=None, pattern=COULEUR_PATTERN)
    description: Optional[str] = None
    date_inventaire: Optional[date] = None
    inventaire: Optional[float] = Field(default=None, ge=0)


# schema d'entree pour la creation
class EspeceCreate(EspeceBase):
    id: str = Field(min_length=1, max_length=100)


# schema d'entree pour la mise a jour
class EspeceUpdate(BaseModel):
    famille_id: Optional[str] = None
    nom_latin: Optional[str] = Field(default=None, max_length=200)
    rendement: Optional[float] = Field(default=None, ge=0, le=100)
    vivace: Optional[bool] = None
    besoin_n: Optional[int] = Field(default=None, ge=0, le=5)
    besoin_p: Optional[int] = Field(default=None, ge=0, le=5)
    besoin_k: Optional[int] = Field(default=None, ge=0, le=5)
    besoin_eau: Optional[int] = Field(default=None, ge=0, le=5)
    a_planifier: Optional[bool] = None
    couleur: Optional[str] = Field(default=None, pattern=COULEUR_PATTERN)
    description: Optional[str] = None
    date_inventaire: Optional[date] = None
    inventaire: Optional[float] = Field(default=None, ge=0)


# schema de sortie
class EspeceResponse(EspeceBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime


# ── Schema pour les fournisseurs


# schema d'entree pour la creation
class FournisseurCreate(BaseModel):
    nom: str = Field(min_length=1, max_length=200)
    contact: Optional[str] = Field(default=None, max_length=200)
    email: Optional[str] = Field(default=None, max_length=255)
    telephone: Optional[str] = Field(default=None, max_length=50)
    adresse: Optional[str] = None
    site_web: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None


# schema d'entree pour la mise a jour
class FournisseurUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contact: Optional[str] = Field(default=None, max_length=200)
    email: Optional[str] = Field(default=None, max_length=255)
    telephone: Optional[str] = Field(default=None, max_length=50)
    adresse: Optional[str] = None
    site_web: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None


# schema de sortie
class FournisseurResponse(FournisseurCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


# ── Schema pour les varietes


class VarieteBase(BaseModel):
    espece_id: str
    fournisseur_id: Optional[int] = None
    semaine_recolte: Optional[int] = Field(default=None, ge=1, le=52)
    duree_recolte: Optional[int] = Field(default=None, ge=0)
    nb_graines_g: Optional[float] = Field(default=None, ge=0)
    prix_graine: Optional[float] = Field(default=None, ge=0)
    stock_graines: Optional[float] = Field(default=None, ge=0)
    stock_plants: Optional[int] = Field(default=None, ge=0)
    date_stock: Optional[date] = None
    bio: bool = False
    description: Optional[str] = None


# schema d'entree pour la creation
class VarieteCreate(VarieteBase):
    id: str = Field(min_length=1, max_length=100)


# schema d'entree pour la mise a jour
class VarieteUpdate(BaseModel):
    espece_id: Optional[str] = None
    fournisseur_id: Optional[int] = None
    semaine_recolte: Optional[int] = Field(default=None, ge=1, le=52)
    duree_recolte: Optional[int] = Field(default=None, ge=0)
    nb_graines_g: Optional[float] = Field(default=None, ge=0)
    prix_graine: Optional[float] = Field(default=None, ge=0)
    stock_graines: Optional[float] = Field(default=None, ge=0)
    stock_plants: Optional[int] = Field(default=None, ge=0)
    date_stock: Optional[date] = None
    bio: Optional[bool] = None
    description: Optional[str] = None


# schema de sortie
class VarieteResponse(VarieteBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime


# ── Schema pour les itineraires techniques


class ItpBase(BaseModel):
    espece_id: Optional[str] = None
    semaine_semis: Optional[int] = Field(default=None, ge=1, le=52)
    semaine_plantation: Optional[int] = Field(default=None, ge=1, le=52)
    semaine_recolte: Optional[int] = Field(default=None, ge=1, le=52)
    duree_pepiniere: Optional[int] = Field(default=None, ge=0, le=365)
    duree_culture: Optional[int] = Field(default=None, ge=0, le=365)
    nb_rangs: Optional[int] = Field(default=None, ge=1, le=20)
    espacement: Optional[int] = Field(default=None, ge=1, le=200)
    espacement_rangs: Optional[int] = Field(default=None, ge=1, le=200)
    notes: Optional[str] = None


# schema d'entree pour la creation
class ItpCreate(ItpBase):
    id: str = Field(min_length=1, max_length=100)


# schema d'entree pour la mise a jour
class ItpUpdate(ItpBase):
    pass


# schema de sortie
class ItpResponse(ItpBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
