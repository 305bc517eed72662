"""
Schémas Pydantic de la comptabilité
"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TypeClient = Literal["particulier", "professionnel", "association"]
TypeFacture = Literal["facture", "avoir"]
StatutFacture = Literal["brouillon", "emise", "payee", "annulee"]
Module = Literal["potager", "elevage", "verger", "general"]


# ── Schema pour les clients


class ClientBase(BaseModel):
    nom: str = Field(min_length=1, max_length=200)
    type: TypeClient = "particulier"
    email: Optional[str] = Field(default=None, max_length=255)
    telephone: Optional[str] = Field(default=None, max_length=50)
    adresse: Optional[str] = None
    code_postal: Optional[str] = Field(default=None, max_length=20)
    ville: Optional[str] = Field(default=None, max_length=100)
    pays: str = Field(default="France", max_length=100)
    siret: Optional[str] = Field(default=None, max_length=20)
    tva_intra: Optional[str] = Field(default=None, max_length=30)
    conditions_paiement: Optional[str] = Field(default=None, max_length=200)
    exonerer_tva: bool = False
    actif: bool = True
    notes: Optional[str] = None


# schema d'entree pour la creation
class ClientCreate(ClientBase):
    pass


# schema d'entree pour la mise a jour
class ClientUpdate(BaseModel):
    nom: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[TypeClient] = None
    email: Optional[str] = Field(default=None, max_length=255)
    telephone: Optional[str] = Field(default=None, max_length=50)
    adresse: Optional[str] = None
    code_postal: Optional[str] = Field(default=None, max_length=20)
    ville: Optional[str] = Field(default=None, max_length=100)
    pays: Optional[str] = Field(default=None, max_length=100)
    siret: Optional[str] = Field(default=None, max_length=20)
    tva_intra: Optional[str] = Field(default=None, max_length=30)
    conditions_paiement: Optional[str] = Field(default=None, max_length=200)
    exonerer_tva: Optional[bool] = None
    actif: Optional[bool] = None
    notes: Optional[str] = None


# schema de sortie
class ClientResponse(ClientBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


# ── Schema pour les factures


class LigneFactureIn(BaseModel):
    description: str = Field(min_length=1, max_length=500)
    quantite: float = Field(gt=0)
    unite: Optional[str] = Field(default=None, max_length=20)
    prix_unitaire: float = Field(ge=0)
    taux_tva: float = Field(default=5.5, ge=0, le=100)


class LigneFactureResponse(LigneFactureIn):
    model_config = ConfigDict(from_attributes=True)

    ordre: int
    montant_ht: float
    montant_tva: float
    montant_ttc: float


class FactureCreate(BaseModel):
    type: TypeFacture = "facture"
    client_id: Optional[int] = None
    client_nom: Optional[str] = Field(default=None, max_length=200)
    client_adresse: Optional[str] = None
    date: dt.date
    date_echeance: Optional[dt.date] = None
    statut: StatutFacture = "brouillon"
    notes: Optional[str] = None
    lignes: list[LigneFactureIn] = Field(min_length=1)


class FactureUpdate(BaseModel):
    date: Optional[dt.date] = None
    date_echeance: Optional[dt.date] = None
    date_paiement: Optional[dt.date] = None
    statut: Optional[StatutFacture] = None
    notes: Optional[str] = None
    lignes: Optional[list[LigneFactureIn]] = Field(default=None, min_length=1)


class FactureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    numero: str
    type: str
    client_id: Optional[int]
    client_nom: str
    client_adresse: Optional[str]
    date: dt.date
    date_echeance: Optional[dt.date]
    date_paiement: Optional[dt.date]
    statut: str
    montant_ht: float
    montant_tva: float
    montant_ttc: float
    notes: Optional[str]
    lignes: list[LigneFactureResponse]
    created_at: dt.datetime
    updated_at: dt.datetime


class TotauxFactures(BaseModel):
    ht: float
    tva: float
    ttc: float


class FactureListResponse(BaseModel):
    items: list[FactureResponse]
    total: int
    page: int
    per_page: int
    pages: int
    totaux: TotauxFactures


# ── Schema pour les depenses manuelles


class DepenseBase(BaseModel):
    date: dt.date
    categorie: str = Field(min_length=1, max_length=100)
    module: Optional[Module] = None
    description: Optional[str] = None
    fournisseur: Optional[str] = Field(default=None, max_length=200)
    ref_facture: Optional[str] = Field(default=None, max_length=100)
    montant: float = Field(ge=0)
    taux_tva: float = Field(default=20, ge=0, le=100)
    paye: bool = True
    date_echeance: Optional[dt.date] = None
    notes: Optional[str] = None


class DepenseCreate(DepenseBase):
    pass


class DepenseUpdate(BaseModel):
    date: Optional[dt.date] = None
    categorie: Optional[str] = Field(default=None, min_length=1, max_length=100)
    module: Optional[Module] = None
    description: Optional[str] = None
    fournisseur: Optional[str] = Field(default=None, max_length=200)
    ref_facture: Optional[str] = Field(default=None, max_length=100)
    montant: Optional[float] = Field(default=None, ge=0)
    taux_tva: Optional[float] = Field(default=None, ge=0, le=100)
    paye: Optional[bool] = None
    date_echeance: Optional[dt.date] = None
    notes: Optional[str] = None


class DepenseResponse(DepenseBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    montant_ht: float
    montant_tva: float
    created_at: dt.datetime


# ── Schema pour les ventes manuelles


class VenteManuelleBase(BaseModel):
    date: dt.date
    categorie: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    quantite: Optional[float] = Field(default=None, ge=0)
    unite: Optional[str] = Field(default=None, max_length=20)
    prix_unitaire: Optional[float] = Field(default=None, ge=0)
    montant: Optional[float] = Field(default=None, ge=0)
    taux_tva: float = Field(default=5.5, ge=0, le=100)
    client_id: Optional[int] = None
    client_nom: Optional[str] = Field(default=None, max_length=200)
    module: Optional[Module] = None
    paye: bool = True
    notes: Optional[str] = None


class VenteManuelleCreate(VenteManuelleBase):
    pass


class VenteManuelleUpdate(BaseModel):
    date: Optional[dt.date] = None
    categorie: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    quantite: Optional[float] = Field(default=None, ge=0)
    unite: Optional[str] = Field(default=None, max_length=20)
    prix_unitaire: Optional[float] = Field(default=None, ge=0)
    montant: Optional[float] = Field(default=None, ge=0)
    taux_tva: Optional[float] = Field(default=None, ge=0, le=100)
    client_id: Optional[int] = None
    client_nom: Optional[str] = Field(default=None, max_length=200)
    module: Optional[Module] = None
    paye: Optional[bool] = None
    notes: Optional[str] = None


class VenteManuelleResponse(VenteManuelleBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    montant: float
    montant_ht: float
    montant_tva: float
    created_at: dt.datetime


# ── Statistiques


class ParModule(BaseModel):
    potager: float
    elevage: float
    verger: float
    general: float


class MoisComptable(BaseModel):
    mois: str
    revenus: float
    depenses: float


class Impayes(BaseModel):
    factures: float
    nb_factures: int
    ventes: float
    nb_ventes: int
    depenses: float
    nb_depenses: int


class StatsComptaResponse(BaseModel):
    annee: int
    revenus: ParModule
    depenses: ParModule
    total_revenus: float
    total_depenses: float
    benefice: float
    marge: float
    tva_collectee: float
    tva_deductible: float
    tva_solde: float
    mensuel: list[MoisComptable]
    impayes: Impayes


# ── Déclaration de TVA


class BaseTva(BaseModel):
    base: float
    tva: float


class BlocTva(BaseModel):
    # cles "5.5", "10" et "20"
    par_taux: dict[str, BaseTva]
    total: float
    base_total: float


class PeriodeTva(BaseModel):
    annee: int
    trimestre: Optional[int]
    debut: dt.date
    fin: dt.date


class SoldeTva(BaseModel):
    tva_a_payer: float
    credit_tva: float


class DetailsTva(BaseModel):
    nb_factures: int
    nb_ventes: int
    nb_ventes_elevage: int
    nb_recoltes_arbres: int
    nb_depenses: int
    nb_consommations_aliments: int


class ResumeTvaResponse(BaseModel):
    periode: PeriodeTva
    collectee: BlocTva
    deductible: BlocTva
    solde: SoldeTva
    details: DetailsTva
