"""
Schémas Pydantic de la planification des cultures
"""

from typing import Optional

from pydantic import BaseModel, Field


class CulturePrevueResponse(BaseModel):
    planche_id: int
    planche: str
    planche_longueur: Optional[float]
    planche_largeur: Optional[float]
    ilot: Optional[str]
    rotation_id: Optional[int]
    rotation_annee: int
    itp_id: Optional[str]
    espece_id: Optional[str]
    espece_couleur: Optional[str]
    variete_id: Optional[str]
    annee: int
    semaine_semis: Optional[int]
    semaine_plantation: Optional[int]
    semaine_recolte: Optional[int]
    duree_culture: Optional[int]
    nb_rangs: Optional[int]
    espacement: Optional[int]
    surface: float
    nb_plants: int
    existe: bool
    culture_id: Optional[int]


class RecolteEspecePrevue(BaseModel):
    espece_id: str
    espece_couleur: Optional[str]
    quantite: float
    surface: float


class RecoltePrevueResponse(BaseModel):
    periode: str
    periode_num: int
    especes: list[RecolteEspecePrevue]
    total_kg: float
    total_surface: float


class BesoinSemenceResponse(BaseModel):
    espece_id: str
    espece_couleur: Optional[str]
    variete_id: Optional[str]
    surface_totale: float
    nb_plants: int
    graines_necessaires: int
    stock_actuel: float
    nb_graines_g: Optional[float]
    a_commander: float


class PlancheBesoin(BaseModel):
    planche: str
    surface: float
    nb_plants: int


class BesoinPlantResponse(BaseModel):
    espece_id: str
    espece_couleur: Optional[str]
    variete_id: Optional[str]
    nb_plants: int
    semaine_plantation: Optional[int]
    stock_actuel: int
    a_commander: int
    cultures: list[PlancheBesoin]


class CultureVoisine(BaseModel):
    planche: str
    espece_id: Optional[str]


class AssociationConnue(BaseModel):
    id: int
    nom: str


class AssociationPrevueResponse(BaseModel):
    planche: str
    ilot: Optional[str]
    espece_id: Optional[str]
    semaine: Optional[int]
    planches_voisines: list[str]
    cultures_voisines: list[CultureVoisine]
    associations: list[AssociationConnue]


# schema d'entree de la creation en lot
class CreerCulturesRequest(BaseModel):
    annee: int = Field(ge=2000, le=2100)
    planche_ids: Optional[list[int]] = None


class CreerCulturesResponse(BaseModel):
    creees: int
    ignorees: int
    cultures: list[int]


class StatsPlanificationResponse(BaseModel):
    annee: int
    total_cultures: int
    cultures_existantes: int
    cultures_a_creer: int
    surface_totale: float
    recoltes_totales: float
    nb_especes: int
