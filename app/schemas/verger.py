"""
Schémas Pydantic du verger
"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TypeArbre = Literal["fruitier", "petit_fruit", "ornement", "haie"]
StatutRecolte = Literal["en_stock", "vendu", "consomme", "perdu"]


# ── Schema pour les arbres


class ArbreBase(BaseModel):
    nom: str = Field(min_length=1, max_length=100)
    type: TypeArbre
    espece: Optional[str] = Field(default=None, max_length=100)
    variete: Optional[str] = Field(default=None, max_length=100)
    porte_greffe: Optional[str] = Field(default=None, max_length=100)
    fournisseur: Optional[str] = Field(default=None, max_length=200)
    date_achat: Optional[dt.date] = None
    prix_achat: Optional[float] = Field(default=None, ge=0)
    date_plantation: Optional[dt.date] = None
    pos_x: Optional[float] = None
    pos_y: Optional[float] = None
    envergure: float = Field(default=2, gt=0)
    etat: Optional[str] = Field(default=None, max_length=50)
    pollinisateur: Optional[str] = Field(default=None, max_length=100)
    productif: bool = False
    rendement_moyen: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


# schema d'entree pour la creation
class ArbreCreate(ArbreBase):
    pass


# schema d'entree pour la mise a jour
class ArbreUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[TypeArbre] = None
    espece: Optional[str] = Field(default=None, max_length=100)
    variete: Optional[str] = Field(default=None, max_length=100)
    porte_greffe: Optional[str] = Field(default=None, max_length=100)
    fournisseur: Optional[str] = Field(default=None, max_length=200)
    date_achat: Optional[dt.date] = None
    prix_achat: Optional[float] = Field(default=None, ge=0)
    date_plantation: Optional[dt.date] = None
    pos_x: Optional[float] = None
    pos_y: Optional[float] = None
    envergure: Optional[float] = Field(default=None, gt=0)
    etat: Optional[str] = Field(default=None, max_length=50)
    pollinisateur: Optional[str] = Field(default=None, max_length=100)
    productif: Optional[bool] = None
    rendement_moyen: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


# schema de sortie
class ArbreResponse(ArbreBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime
    updated_at: dt.datetime


# ── Schema pour les recoltes d'arbres


class RecolteArbreBase(BaseModel):
    arbre_id: int
    date: dt.date
    quantite: float = Field(ge=0)
    qualite: Optional[str] = Field(default=None, max_length=50)
    statut: StatutRecolte = "en_stock"
    prix_kg: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class RecolteArbreCreate(RecolteArbreBase):
    pass


class RecolteArbreUpdate(BaseModel):
    date: Optional[dt.date] = None
    quantite: Optional[float] = Field(default=None, ge=0)
    qualite: Optional[str] = Field(default=None, max_length=50)
    statut: Optional[StatutRecolte] = None
    prix_kg: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class RecolteArbreResponse(RecolteArbreBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


# ── Schema pour les operations


class OperationArbreBase(BaseModel):
    arbre_id: int
    type: str = Field(min_length=1, max_length=50)
    date: dt.date
    date_prevue: Optional[dt.date] = None
    fait: bool = True
    cout: Optional[float] = Field(default=None, ge=0)
    produit: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = None


class OperationArbreCreate(OperationArbreBase):
    pass


class OperationArbreUpdate(BaseModel):
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    date: Optional[dt.date] = None
    date_prevue: Optional[dt.date] = None
    fait: Optional[bool] = None
    cout: Optional[float] = Field(default=None, ge=0)
    produit: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = None


class OperationArbreResponse(OperationArbreBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


# ── Statistiques


class StatsVergerResponse(BaseModel):
    annee: int
    nb_arbres: int
    par_type: dict[str, int]
    productifs: int
    recolte_kg: float
    nb_recoltes: int
    valeur_vendue: float
    cout_operations: float
    operations_a_faire: int
