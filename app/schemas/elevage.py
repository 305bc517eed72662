"""
Schémas Pydantic de l'élevage
"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.referentiel import COULEUR_PATTERN

TypeEspeceAnimale = Literal["volaille", "mammifere_petit", "mammifere_grand"]
Production = Literal["oeufs", "viande", "lait", "laine", "mixte"]
StatutLot = Literal["actif", "reforme", "vendu", "abattu"]
StatutAnimal = Literal["actif", "vendu", "mort", "abattu"]
TypeVente = Literal["oeufs", "viande", "animal_vivant", "lait", "autre"]


def _cible_requise(data, message: str):
    if data.animal_id is None and data.lot_id is None:
        raise ValueError(message)
    return data


# ── Schema pour les especes animales


class EspeceAnimaleBase(BaseModel):
    nom: str = Field(min_length=1, max_length=100)
    type: TypeEspeceAnimale
    production: Production
    duree_gestation: Optional[int] = Field(default=None, ge=0)
    duree_couvaison: Optional[int] = Field(default=None, ge=0)
    duree_elevage: Optional[int] = Field(default=None, ge=0)
    poids_adulte: Optional[float] = Field(default=None, ge=0)
    ponte_annuelle: Optional[int] = Field(default=None, ge=0)
    consommation_jour: Optional[float] = Field(default=None, ge=0)
    prix_achat: Optional[float] = Field(default=None, ge=0)
    couleur: Optional[str] = Field(default=None, pattern=COULEUR_PATTERN)
    description: Optional[str] = None


# schema d'entree pour la creation
class EspeceAnimaleCreate(EspeceAnimaleBase):
    id: str = Field(min_length=1, max_length=100)


# schema d'entree pour la mise a jour
class EspeceAnimaleUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[TypeEspeceAnimale] = None
    production: Optional[Production] = None
    duree_gestation: Optional[int] = Field(default=None, ge=0)
    duree_couvaison: Optional[int] = Field(default=None, ge=0)
    duree_elevage: Optional[int] = Field(default=None, ge=0)
    poids_adulte: Optional[float] = Field(default=None, ge=0)
    ponte_annuelle: Optional[int] = Field(default=None, ge=0)
    consommation_jour: Optional[float] = Field(default=None, ge=0)
    prix_achat: Optional[float] = Field(default=None, ge=0)
    couleur: Optional[str] = Field(default=None, pattern=COULEUR_PATTERN)
    description: Optional[str] = None


# schema de sortie
class EspeceAnimaleResponse(EspeceAnimaleBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: dt.datetime


# ── Schema pour les lots


class LotCreate(BaseModel):
    espece_animale_id: str = Field(min_length=1)
    nom: Optional[str] = Field(default=None, max_length=100)
    date_arrivee: dt.date
    quantite_initiale: int = Field(ge=1)
    provenance: Optional[str] = Field(default=None, max_length=200)
    prix_achat_total: Optional[float] = Field(default=None, ge=0)
    statut: StatutLot = "actif"
    notes: Optional[str] = None


class LotUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, max_length=100)
    date_arrivee: Optional[dt.date] = None
    quantite_actuelle: Optional[int] = Field(default=None, ge=0)
    provenance: Optional[str] = Field(default=None, max_length=200)
    prix_achat_total: Optional[float] = Field(default=None, ge=0)
    statut: Optional[StatutLot] = None
    date_reforme: Optional[dt.date] = None
    notes: Optional[str] = None


class LotResponse(LotCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quantite_actuelle: int
    date_reforme: Optional[dt.date]
    created_at: dt.datetime


# ── Schema pour les animaux


class AnimalBase(BaseModel):
    espece_animale_id: str = Field(min_length=1)
    lot_id: Optional[int] = None
    nom: Optional[str] = Field(default=None, max_length=100)
    identifiant: Optional[str] = Field(default=None, max_length=100)
    sexe: Optional[str] = Field(default=None, max_length=10)
    date_naissance: Optional[dt.date] = None
    date_arrivee: Optional[dt.date] = None
    provenance: Optional[str] = Field(default=None, max_length=200)
    prix_achat: Optional[float] = Field(default=None, ge=0)
    statut: StatutAnimal = "actif"
    date_sortie: Optional[dt.date] = None
    cause_sortie: Optional[str] = Field(default=None, max_length=100)
    poids: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class AnimalCreate(AnimalBase):
    pass


class AnimalUpdate(BaseModel):
    lot_id: Optional[int] = None
    nom: Optional[str] = Field(default=None, max_length=100)
    identifiant: Optional[str] = Field(default=None, max_length=100)
    sexe: Optional[str] = Field(default=None, max_length=10)
    date_naissance: Optional[dt.date] = None
    date_arrivee: Optional[dt.date] = None
    provenance: Optional[str] = Field(default=None, max_length=200)
    prix_achat: Optional[float] = Field(default=None, ge=0)
    statut: Optional[StatutAnimal] = None
    date_sortie: Optional[dt.date] = None
    cause_sortie: Optional[str] = Field(default=None, max_length=100)
    poids: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class AnimalResponse(AnimalBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


# ── Schema pour les aliments et leur stock


class AlimentBase(BaseModel):
    nom: str = Field(min_length=1, max_length=100)
    type: Optional[str] = Field(default=None, max_length=50)
    unite: str = Field(default="kg", max_length=20)
    prix_defaut: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None


class AlimentCreate(AlimentBase):
    pass


class AlimentUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[str] = Field(default=None, max_length=50)
    unite: Optional[str] = Field(default=None, max_length=20)
    prix_defaut: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None


class AlimentResponse(AlimentBase):
    id: int
    stock: Optional[float] = None
    stock_min: Optional[float] = None
    prix: Optional[float] = None
    stock_bas: bool = False


class AlimentListResponse(BaseModel):
    items: list[AlimentResponse]
    stock_bas: int


# schema d'entree du stock de l'utilisateur
class StockAlimentUpdate(BaseModel):
    stock: Optional[float] = None
    stock_min: Optional[float] = Field(default=None, ge=0)
    prix: Optional[float] = Field(default=None, ge=0)


# ── Schema pour les consommations d'aliments


class ConsommationAlimentCreate(BaseModel):
    aliment_id: int
    lot_id: Optional[int] = None
    date: dt.date
    quantite: float = Field(gt=0)
    notes: Optional[str] = None


class ConsommationAlimentResponse(ConsommationAlimentCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


# ── Schema pour la production d'oeufs


class ProductionOeufsBase(BaseModel):
    date: dt.date
    lot_id: Optional[int] = None
    animal_id: Optional[int] = None
    quantite: int = Field(ge=0)
    casses: int = Field(default=0, ge=0)
    sales: int = Field(default=0, ge=0)
    calibre: Optional[str] = Field(default=None, max_length=10)
    notes: Optional[str] = None


class ProductionOeufsCreate(ProductionOeufsBase):
    @model_validator(mode="after")
    def check_cible(self):
        return _cible_requise(self, "Un lot ou un animal est requis")


class ProductionOeufsUpdate(BaseModel):
    date: Optional[dt.date] = None
    quantite: Optional[int] = Field(default=None, ge=0)
    casses: Optional[int] = Field(default=None, ge=0)
    sales: Optional[int] = Field(default=None, ge=0)
    calibre: Optional[str] = Field(default=None, max_length=10)
    notes: Optional[str] = None


class ProductionOeufsResponse(ProductionOeufsBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


# ── Schema pour les soins


class SoinBase(BaseModel):
    animal_id: Optional[int] = None
    lot_id: Optional[int] = None
    date: dt.date
    type: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None
    produit: Optional[str] = Field(default=None, max_length=200)
    quantite: Optional[float] = Field(default=None, ge=0)
    unite: Optional[str] = Field(default=None, max_length=20)
    cout: Optional[float] = Field(default=None, ge=0)
    veterinaire: Optional[str] = Field(default=None, max_length=200)
    date_prevue: Optional[dt.date] = None
    fait: bool = True
    notes: Optional[str] = None


class SoinCreate(SoinBase):
    @model_validator(mode="after")
    def check_cible(self):
        return _cible_requise(self, "Un animal ou un lot est requis")


class SoinUpdate(BaseModel):
    date: Optional[dt.date] = None
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None
    produit: Optional[str] = Field(default=None, max_length=200)
    quantite: Optional[float] = Field(default=None, ge=0)
    unite: Optional[str] = Field(default=None, max_length=20)
    cout: Optional[float] = Field(default=None, ge=0)
    veterinaire: Optional[str] = Field(default=None, max_length=200)
    date_prevue: Optional[dt.date] = None
    fait: Optional[bool] = None
    notes: Optional[str] = None


class SoinResponse(SoinBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


# ── Schema pour les ventes de produits


class VenteBase(BaseModel):
    date: dt.date
    type: TypeVente
    animal_id: Optional[int] = None
    lot_id: Optional[int] = None
    client_id: Optional[int] = None
    description: Optional[str] = None
    quantite: float = Field(gt=0)
    unite: Optional[str] = Field(default=None, max_length=20)
    prix_unitaire: float = Field(ge=0)
    paye: bool = True
    notes: Optional[str] = None


class VenteCreate(VenteBase):
    pass


class VenteUpdate(BaseModel):
    date: Optional[dt.date] = None
    client_id: Optional[int] = None
    description: Optional[str] = None
    quantite: Optional[float] = Field(default=None, gt=0)
    unite: Optional[str] = Field(default=None, max_length=20)
    prix_unitaire: Optional[float] = Field(default=None, ge=0)
    paye: Optional[bool] = None
    notes: Optional[str] = None


class VenteResponse(VenteBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prix_total: float
    created_at: dt.datetime


class TotalVenteType(BaseModel):
    type: str
    total: float
    count: int


class VenteListResponse(BaseModel):
    items: list[VenteResponse]
    total: int
    page: int
    per_page: int
    pages: int
    montant_total: float
    par_type: list[TotalVenteType]


# ── Statistiques


class AnimauxEspece(BaseModel):
    espece_animale_id: str
    nom: str
    couleur: Optional[str]
    count: int


class CoutsElevage(BaseModel):
    soins: float
    aliments: float
    achats: float
    total: float


class StatsElevageResponse(BaseModel):
    annee: int
    animaux_actifs: int
    lots_actifs: int
    effectif_lots: int
    animaux_par_espece: list[AnimauxEspece]
    oeufs_annee: int
    oeufs_par_mois: list[int]
    ventes_annee: float
    nb_ventes: int
    ventes_par_type: list[TotalVenteType]
    soins_a_planifier: int
    aliments_stock_bas: int
    couts: CoutsElevage
