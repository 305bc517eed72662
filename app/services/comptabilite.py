"""
Service de comptabilité : clients, factures, dépenses et ventes manuelles
Les montants saisis sont TTC, le HT et la TVA en sont déduits.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.agronomie.calendrier import MOIS_COURTS
from app.dependencies.resolve import check_owned_reference
from app.models import (
    Animal,
    Arbre,
    Client,
    ConsommationAliment,
    DepenseManuelle,
    Facture,
    LigneFacture,
    LotAnimaux,
    OperationArbre,
    RecolteArbre,
    SoinAnimal,
    StockAliment,
    User,
    VenteManuelle,
    VenteProduit,
)
from app.services.audit import log_action
from app.services.crud import create_entity, delete_entity, update_entity
from app.utils import round2

logger = logging.getLogger(__name__)

MODULES = ("potager", "elevage", "verger", "general")
PREFIXES_FACTURE = {"facture": "F", "avoir": "AV"}
STATUTS_COMPTABILISES = ("emise", "payee")
TAUX_TVA_DECLARES = (5.5, 10.0, 20.0)
TAUX_PRODUITS_AGRICOLES = 5.5
TAUX_ALIMENTS_ANIMAUX = 10.0


def ventiler_ttc(montant: float, taux_tva: float) -> tuple[float, float]:
    """HT et TVA d'un montant TTC"""
    ht = round2(montant / (1 + taux_tva / 100))
    return ht, round2(montant - ht)


def _periode(model, annee: Optional[int]) -> list:
    if annee is None:
        return []
    return [model.date >= date(annee, 1, 1), model.date <= date(annee, 12, 31)]


def _page(db: Session, model, filtres: list, offset: int, limit: int) -> tuple[list, int]:
    total = db.execute(select(func.count(model.id)).where(*filtres)).scalar_one()
    items = (
        db.execute(
            select(model)
            .where(*filtres)
            .order_by(model.date.desc(), model.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(items), total


# ── Clients


def list_clients(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    actif: Optional[bool] = None,
    search: Optional[str] = None,
) -> tuple[list[Client], int]:
    filtres = [Client.user_id == user.id]
    if actif is not None:
        filtres.append(Client.actif == actif)
    if search:
        motif = f"%{search}%"
        filtres.append(Client.nom.ilike(motif) | Client.ville.ilike(motif))

    total = db.execute(select(func.count(Client.id)).where(*filtres)).scalar_one()
    clients = (
        db.execute(select(Client).where(*filtres).order_by(Client.nom).offset(offset).limit(limit))
        .scalars()
        .all()
    )
    return list(clients), total


def create_client(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Client:
    client = Client(user_id=user.id, **data)
    return create_entity(
        db,
        client,
        resource_type="client",
        actor_id=user.id,
        ip_address=ip_address,
        details={"nom": client.nom},
    )


def update_client(
    db: Session,
    *,
    user: User,
    client: Client,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Client:
    return update_entity(
        db, client, changes, resource_type="client", actor_id=user.id, ip_address=ip_address
    )


def delete_client(
    db: Session, *, user: User, client: Client, ip_address: Optional[str] = None
) -> None:
    """Supprime un client, les factures gardent le nom et l'adresse copiés"""
    for model in (Facture, VenteManuelle, VenteProduit):
        db.execute(update(model).where(model.client_id == client.id).values(client_id=None))
    delete_entity(db, client, resource_type="client", actor_id=user.id, ip_address=ip_address)


def adresse_client(client: Client) -> Optional[str]:
    """Adresse sur une ligne : "adresse, code postal ville" """
    ville = " ".join(p for p in (client.code_postal, client.ville) if p)
    parties = [p for p in (client.adresse, ville) if p]
    return ", ".join(parties) or None


# ── Factures


def calculer_ligne(ligne: dict[str, Any], exonere: bool) -> dict[str, Any]:
    ht = round2(ligne["quantite"] * ligne["prix_unitaire"])
    tva = 0.0 if exonere else round2(ht * ligne["taux_tva"] / 100)
    return {**ligne, "montant_ht": ht, "montant_tva": tva, "montant_ttc": round2(ht + tva)}


def _appliquer_lignes(facture: Facture, lignes: list[dict[str, Any]], exonere: bool) -> None:
    facture.lignes = [
        LigneFacture(ordre=i, **calculer_ligne(ligne, exonere))
        for i, ligne in enumerate(lignes, start=1)
    ]
    facture.montant_ht = round2(sum(ligne.montant_ht for ligne in facture.lignes))
    facture.montant_tva = round2(sum(ligne.montant_tva for ligne in facture.lignes))
    facture.montant_ttc = round2(sum(ligne.montant_ttc for ligne in facture.lignes))


def prochain_numero(db: Session, *, user: User, type: str, annee: int) -> str:
    """Numéro suivant {F|AV}-{année}-{NNNN}, séquentiel par utilisateur, type et année"""
    prefixe = f"{PREFIXES_FACTURE[type]}-{annee}-"
    numeros = db.execute(
        select(Facture.numero).where(
            Facture.user_id == user.id, Facture.numero.like(f"{prefixe}%")
        )
    ).scalars()
    dernier = max((int(n.rsplit("-", 1)[1]) for n in numeros), default=0)
    return f"{prefixe}{dernier + 1:04d}"


def _exonere(db: Session, facture: Facture) -> bool:
    client = db.get(Client, facture.client_id) if facture.client_id else None
    return bool(client and client.exonerer_tva)


def list_factures(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    annee: Optional[int] = None,
    statut: Optional[str] = None,
    type: Optional[str] = None,
    client_id: Optional[int] = None,
) -> tuple[list[Facture], int, dict]:
    """Liste paginée des factures. Les totaux ignorent les factures annulées."""
    filtres = [Facture.user_id == user.id] + _periode(Facture, annee)
    if statut:
        filtres.append(Facture.statut == statut)
    if type:
        filtres.append(Facture.type == type)
    if client_id is not None:
        filtres.append(Facture.client_id == client_id)

    factures, total = _page(db, Facture, filtres, offset, limit)
    ht, tva, ttc = db.execute(
        select(
            func.coalesce(func.sum(Facture.montant_ht), 0),
            func.coalesce(func.sum(Facture.montant_tva), 0),
            func.coalesce(func.sum(Facture.montant_ttc), 0),
        ).where(*filtres, Facture.statut != "annulee")
    ).one()
    return factures, total, {"ht": round2(ht), "tva": round2(tva), "ttc": round2(ttc)}


def create_facture(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Facture:
    """
    Crée une facture ou un avoir

    Le nom et l'adresse du client sont copiés sur la facture. Les montants
    sont recalculés depuis les lignes, sans TVA pour un client exonéré.
    """
    lignes = data.pop("lignes")
    client = None
    if data.get("client_id") is not None:
        check_owned_reference(db, Client, data["client_id"], user, "Client")
        client = db.get(Client, data["client_id"])
        data["client_nom"] = client.nom
        data["client_adresse"] = adresse_client(client)
    if not data.get("client_nom"):
        raise HTTPException(status_code=400, detail="Un client ou un nom de client est requis")

    facture = Facture(
        user_id=user.id,
        numero=prochain_numero(db, user=user, type=data["type"], annee=data["date"].year),
        **data,
    )
    if facture.statut == "payee":
        facture.date_paiement = date.today()
    _appliquer_lignes(facture, lignes, bool(client and client.exonerer_tva))

    create_entity(
        db,
        facture,
        resource_type="facture",
        actor_id=user.id,
        ip_address=ip_address,
        details={"numero": facture.numero, "montant_ttc": facture.montant_ttc},
    )
    logger.info("Facture %s créée pour l'utilisateur %s", facture.numero, user.id)
    return facture


def update_facture(
    db: Session,
    *,
    user: User,
    facture: Facture,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Facture:
    if facture.statut == "annulee":
        raise HTTPException(status_code=400, detail="Une facture annulée ne peut plus être modifiée")

    lignes = changes.pop("lignes", None)
    if lignes is not None:
        _appliquer_lignes(facture, lignes, _exonere(db, facture))
    if changes.get("statut") == "payee" and not (changes.get("date_paiement") or facture.date_paiement):
        changes["date_paiement"] = date.today()

    return update_entity(
        db, facture, changes, resource_type="facture", actor_id=user.id, ip_address=ip_address
    )


def annuler_facture(
    db: Session, *, user: User, facture: Facture, ip_address: Optional[str] = None
) -> None:
    """Une facture n'est jamais supprimée : elle passe au statut annulée"""
    facture.statut = "annulee"
    db.flush()
    log_action(
        db,
        user_id=user.id,
        action="DELETE",
        resource_type="facture",
        resource_id=str(facture.id),
        details={"numero": facture.numero, "statut": "annulee"},
        ip_address=ip_address,
    )


# ── Depenses et ventes manuelles


def _montants_depense(data: dict[str, Any], depense: Optional[DepenseManuelle] = None) -> None:
    montant = data.get("montant", depense.montant if depense else None)
    taux = data.get("taux_tva")
    if taux is None:
        taux = depense.taux_tva if depense else 20
    if montant is None:
        return
    data["montant_ht"], data["montant_tva"] = ventiler_ttc(montant, taux)


def list_depenses(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    annee: Optional[int] = None,
    categorie: Optional[str] = None,
    module: Optional[str] = None,
    paye: Optional[bool] = None,
) -> tuple[list[DepenseManuelle], int]:
    filtres = [DepenseManuelle.user_id == user.id] + _periode(DepenseManuelle, annee)
    if categorie:
        filtres.append(DepenseManuelle.categorie == categorie)
    if module:
        filtres.append(DepenseManuelle.module == module)
    if paye is not None:
        filtres.append(DepenseManuelle.paye == paye)
    return _page(db, DepenseManuelle, filtres, offset, limit)


def create_depense(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> DepenseManuelle:
    _montants_depense(data)
    depense = DepenseManuelle(user_id=user.id, **data)
    return create_entity(
        db,
        depense,
        resource_type="depense_manuelle",
        actor_id=user.id,
        ip_address=ip_address,
        details={"categorie": depense.categorie, "montant": depense.montant},
    )


def update_depense(
    db: Session,
    *,
    user: User,
    depense: DepenseManuelle,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> DepenseManuelle:
    if "montant" in changes or "taux_tva" in changes:
        _montants_depense(changes, depense)
    return update_entity(
        db, depense, changes, resource_type="depense_manuelle", actor_id=user.id, ip_address=ip_address
    )


def delete_depense(
    db: Session, *, user: User, depense: DepenseManuelle, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db, depense, resource_type="depense_manuelle", actor_id=user.id, ip_address=ip_address
    )


def _montants_vente(data: dict[str, Any], vente: Optional[VenteManuelle] = None) -> None:
    """Montant TTC saisi, sinon quantité x prix unitaire"""
    def valeur(champ):
        if champ in data:
            return data[champ]
        return getattr(vente, champ) if vente else None

    montant = data.get("montant")
    if montant is None:
        quantite, prix = valeur("quantite"), valeur("prix_unitaire")
        if quantite is not None and prix is not None:
            montant = round2(quantite * prix)
        elif vente is not None:
            montant = vente.montant
        else:
            raise HTTPException(
                status_code=400, detail="Montant ou quantité et prix unitaire requis"
            )
    taux = valeur("taux_tva")
    data["montant"] = montant
    data["montant_ht"], data["montant_tva"] = ventiler_ttc(montant, 5.5 if taux is None else taux)


def _client_vente(db: Session, user: User, data: dict[str, Any]) -> None:
    if data.get("client_id") is not None:
        check_owned_reference(db, Client, data["client_id"], user, "Client")
        data["client_nom"] = db.get(Client, data["client_id"]).nom


def list_ventes_manuelles(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    annee: Optional[int] = None,
    categorie: Optional[str] = None,
    module: Optional[str] = None,
    paye: Optional[bool] = None,
) -> tuple[list[VenteManuelle], int]:
    filtres = [VenteManuelle.user_id == user.id] + _periode(VenteManuelle, annee)
    if categorie:
        filtres.append(VenteManuelle.categorie == categorie)
    if module:
        filtres.append(VenteManuelle.module == module)
    if paye is not None:
        filtres.append(VenteManuelle.paye == paye)
    return _page(db, VenteManuelle, filtres, offset, limit)


def create_vente_manuelle(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> VenteManuelle:
    _client_vente(db, user, data)
    _montants_vente(data)
    vente = VenteManuelle(user_id=user.id, **data)
    return create_entity(
        db,
        vente,
        resource_type="vente_manuelle",
        actor_id=user.id,
        ip_address=ip_address,
        details={"categorie": vente.categorie, "montant": vente.montant},
    )


def update_vente_manuelle(
    db: Session,
    *,
    user: User,
    vente: VenteManuelle,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> VenteManuelle:
    _client_vente(db, user, changes)
    if {"montant", "quantite", "prix_unitaire", "taux_tva"} & changes.keys():
        _montants_vente(changes, vente)
    return update_entity(
        db, vente, changes, resource_type="vente_manuelle", actor_id=user.id, ip_address=ip_address
    )


def delete_vente_manuelle(
    db: Session, *, user: User, vente: VenteManuelle, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db, vente, resource_type="vente_manuelle", actor_id=user.id, ip_address=ip_address
    )


# ── Statistiques


def _module(valeur: Optional[str]) -> str:
    return valeur if valeur in MODULES else "general"


def _prix_aliments(db: Session, user: User) -> dict[int, Optional[float]]:
    return {
        s.aliment_id: s.prix
        for s in db.execute(select(StockAliment).where(StockAliment.user_id == user.id)).scalars()
    }


def _prix_aliment(consommation: ConsommationAliment, prix_aliments: dict) -> float:
    """Prix du stock de l'utilisateur, sinon prix par défaut de l'aliment"""
    prix = prix_aliments.get(consommation.aliment_id)
    if prix is None:
        prix = consommation.aliment.prix_defaut or 0
    return prix


def mouvements(db: Session, *, user: User, annee: int) -> tuple[list, list]:
    """
    Revenus et dépenses de l'année, tous modules confondus

    Chaque mouvement est un tuple (date, module, montant TTC). Un avoir
    compte en négatif.
    """
    revenus = []
    depenses = []

    factures = db.execute(
        select(Facture).where(
            Facture.user_id == user.id,
            Facture.statut.in_(STATUTS_COMPTABILISES),
            *_periode(Facture, annee),
        )
    ).scalars()
    for f in factures:
        signe = -1 if f.type == "avoir" else 1
        revenus.append((f.date, "general", signe * f.montant_ttc))

    for v in db.execute(
        select(VenteManuelle).where(VenteManuelle.user_id == user.id, *_periode(VenteManuelle, annee))
    ).scalars():
        revenus.append((v.date, _module(v.module), v.montant))

    for v in db.execute(
        select(VenteProduit).where(VenteProduit.user_id == user.id, *_periode(VenteProduit, annee))
    ).scalars():
        revenus.append((v.date, "elevage", v.prix_total))

    for r in db.execute(
        select(RecolteArbre).where(
            RecolteArbre.user_id == user.id,
            RecolteArbre.statut == "vendu",
            *_periode(RecolteArbre, annee),
        )
    ).scalars():
        revenus.append((r.date, "verger", r.quantite * (r.prix_kg or 0)))

    for d in db.execute(
        select(DepenseManuelle).where(
            DepenseManuelle.user_id == user.id, *_periode(DepenseManuelle, annee)
        )
    ).scalars():
        depenses.append((d.date, _module(d.module), d.montant))

    for s in db.execute(
        select(SoinAnimal).where(
            SoinAnimal.user_id == user.id, SoinAnimal.cout.is_not(None), *_periode(SoinAnimal, annee)
        )
    ).scalars():
        depenses.append((s.date, "elevage", s.cout))

    prix_aliments = _prix_aliments(db, user)
    for c in db.execute(
        select(ConsommationAliment).where(
            ConsommationAliment.user_id == user.id, *_periode(ConsommationAliment, annee)
        )
    ).scalars():
        depenses.append((c.date, "elevage", c.quantite * _prix_aliment(c, prix_aliments)))

    debut, fin = date(annee, 1, 1), date(annee, 12, 31)
    for a in db.execute(
        select(Animal).where(
            Animal.user_id == user.id,
            Animal.prix_achat.is_not(None),
            Animal.date_arrivee >= debut,
            Animal.date_arrivee <= fin,
        )
    ).scalars():
        depenses.append((a.date_arrivee, "elevage", a.prix_achat))
    for lot in db.execute(
        select(LotAnimaux).where(
            LotAnimaux.user_id == user.id,
            LotAnimaux.prix_achat_total.is_not(None),
            LotAnimaux.date_arrivee >= debut,
            LotAnimaux.date_arrivee <= fin,
        )
    ).scalars():
        depenses.append((lot.date_arrivee, "elevage", lot.prix_achat_total))

    for o in db.execute(
        select(OperationArbre).where(
            OperationArbre.user_id == user.id,
            OperationArbre.cout.is_not(None),
            *_periode(OperationArbre, annee),
        )
    ).scalars():
        depenses.append((o.date, "verger", o.cout))

    # achat d'un arbre : date d'achat, sinon date de plantation
    for arbre in db.execute(
        select(Arbre).where(Arbre.user_id == user.id, Arbre.prix_achat.is_not(None))
    ).scalars():
        jour = arbre.date_achat or arbre.date_plantation
        if jour and debut <= jour <= fin:
            depenses.append((jour, "verger", arbre.prix_achat))

    return revenus, depenses


def stats_comptabilite(db: Session, *, user: User, annee: int) -> dict:
    revenus, depenses = mouvements(db, user=user, annee=annee)

    revenus_module = defaultdict(float)
    depenses_module = defaultdict(float)
    mensuel = [{"mois": m, "revenus": 0.0, "depenses": 0.0} for m in MOIS_COURTS]
    for jour, module, montant in revenus:
        revenus_module[module] += montant
        mensuel[jour.month - 1]["revenus"] += montant
    for jour, module, montant in depenses:
        depenses_module[module] += montant
        mensuel[jour.month - 1]["depenses"] += montant

    total_revenus = sum(revenus_module.values())
    total_depenses = sum(depenses_module.values())
    benefice = total_revenus - total_depenses

    tva_factures = db.execute(
        select(Facture.type, func.coalesce(func.sum(Facture.montant_tva), 0))
        .where(
            Facture.user_id == user.id,
            Facture.statut.in_(STATUTS_COMPTABILISES),
            *_periode(Facture, annee),
        )
        .group_by(Facture.type)
    ).all()
    tva_ventes = db.execute(
        select(func.coalesce(func.sum(VenteManuelle.montant_tva), 0)).where(
            VenteManuelle.user_id == user.id, *_periode(VenteManuelle, annee)
        )
    ).scalar_one()
    tva_collectee = float(tva_ventes) + sum(
        (-tva if type_facture == "avoir" else tva) for type_facture, tva in tva_factures
    )
    tva_deductible = float(
        db.execute(
            select(func.coalesce(func.sum(DepenseManuelle.montant_tva), 0)).where(
                DepenseManuelle.user_id == user.id, *_periode(DepenseManuelle, annee)
            )
        ).scalar_one()
    )

    return {
        "annee": annee,
        "revenus": {m: round2(revenus_module[m]) for m in MODULES},
        "depenses": {m: round2(depenses_module[m]) for m in MODULES},
        "total_revenus": round2(total_revenus),
        "total_depenses": round2(total_depenses),
        "benefice": round2(benefice),
        "marge": round2(benefice / total_revenus * 100) if total_revenus > 0 else 0,
        "tva_collectee": round2(tva_collectee),
        "tva_deductible": round2(tva_deductible),
        "tva_solde": round2(tva_collectee - tva_deductible),
        "mensuel": [
            {"mois": m["mois"], "revenus": round2(m["revenus"]), "depenses": round2(m["depenses"])}
            for m in mensuel
        ],
        "impayes": impayes(db, user=user),
    }


def impayes(db: Session, *, user: User) -> dict:
    """Factures émises non payées, ventes et dépenses non réglées, toutes années"""
    nb_factures, factures = db.execute(
        select(func.count(Facture.id), func.coalesce(func.sum(Facture.montant_ttc), 0)).where(
            Facture.user_id == user.id, Facture.statut == "emise", Facture.type == "facture"
        )
    ).one()
    nb_manuelles, manuelles = db.execute(
        select(func.count(VenteManuelle.id), func.coalesce(func.sum(VenteManuelle.montant), 0)).where(
            VenteManuelle.user_id == user.id, VenteManuelle.paye.is_(False)
        )
    ).one()
    nb_elevage, elevage = db.execute(
        select(func.count(VenteProduit.id), func.coalesce(func.sum(VenteProduit.prix_total), 0)).where(
            VenteProduit.user_id == user.id, VenteProduit.paye.is_(False)
        )
    ).one()
    nb_depenses, depenses = db.execute(
        select(
            func.count(DepenseManuelle.id), func.coalesce(func.sum(DepenseManuelle.montant), 0)
        ).where(DepenseManuelle.user_id == user.id, DepenseManuelle.paye.is_(False))
    ).one()
    return {
        "factures": round2(float(factures)),
        "nb_factures": nb_factures,
        "ventes": round2(float(manuelles) + float(elevage)),
        "nb_ventes": nb_manuelles + nb_elevage,
        "depenses": round2(float(depenses)),
        "nb_depenses": nb_depenses,
    }


# ── Déclaration de TVA


def bornes_periode(annee: int, trimestre: Optional[int] = None) -> tuple[date, date]:
    """Premier et dernier jour de l'année, ou du trimestre demandé"""
    if trimestre is None:
        return date(annee, 1, 1), date(annee, 12, 31)
    debut = date(annee, (trimestre - 1) * 3 + 1, 1)
    if trimestre == 4:
        return debut, date(annee, 12, 31)
    return debut, date(annee, trimestre * 3 + 1, 1) - timedelta(days=1)


def _cle_taux(taux: float) -> Optional[str]:
    for declare in TAUX_TVA_DECLARES:
        if abs(taux - declare) < 1e-9:
            return f"{declare:g}"
    return None


def _cumuler(par_taux: dict, taux: float, base: float, tva: float) -> None:
    # les taux hors declaration (0, 2.1...) ne sont pas ventiles
    cle = _cle_taux(taux)
    if cle is not None:
        par_taux[cle]["base"] += base
        par_taux[cle]["tva"] += tva


def _bloc_tva(par_taux: dict) -> dict:
    return {
        "par_taux": {
            cle: {"base": round2(t["base"]), "tva": round2(t["tva"])} for cle, t in par_taux.items()
        },
        "total": round2(sum(t["tva"] for t in par_taux.values())),
        "base_total": round2(sum(t["base"] for t in par_taux.values())),
    }


def resume_tva(
    db: Session, *, user: User, annee: int, trimestre: Optional[int] = None
) -> dict:
    """
    Résumé de TVA par taux pour la déclaration

    Collectée : lignes des factures émises ou payées (avoirs en négatif),
    ventes manuelles, ventes de l'élevage et fruits vendus, ces deux
    derniers à 5,5 %. Déductible : dépenses manuelles et aliments
    distribués, ces derniers à 10 %.
    """
    debut, fin = bornes_periode(annee, trimestre)
    collectee = {f"{t:g}": {"base": 0.0, "tva": 0.0} for t in TAUX_TVA_DECLARES}
    deductible = {f"{t:g}": {"base": 0.0, "tva": 0.0} for t in TAUX_TVA_DECLARES}

    def entre(model) -> list:
        return [model.user_id == user.id, model.date >= debut, model.date <= fin]

    factures = db.execute(
        select(Facture).where(*entre(Facture), Facture.statut.in_(STATUTS_COMPTABILISES))
    ).scalars().all()
    for facture in factures:
        signe = -1 if facture.type == "avoir" else 1
        for ligne in facture.lignes:
            _cumuler(collectee, ligne.taux_tva, signe * ligne.montant_ht, signe * ligne.montant_tva)

    ventes = db.execute(select(VenteManuelle).where(*entre(VenteManuelle))).scalars().all()
    for vente in ventes:
        _cumuler(collectee, vente.taux_tva, vente.montant_ht, vente.montant_tva)

    ventes_elevage = db.execute(select(VenteProduit).where(*entre(VenteProduit))).scalars().all()
    for vente in ventes_elevage:
        ht, tva = ventiler_ttc(vente.prix_total, TAUX_PRODUITS_AGRICOLES)
        _cumuler(collectee, TAUX_PRODUITS_AGRICOLES, ht, tva)

    recoltes_arbres = db.execute(
        select(RecolteArbre).where(
            *entre(RecolteArbre), RecolteArbre.statut == "vendu", RecolteArbre.prix_kg.is_not(None)
        )
    ).scalars().all()
    for recolte in recoltes_arbres:
        ttc = recolte.quantite * recolte.prix_kg
        if ttc > 0:
            ht, tva = ventiler_ttc(ttc, TAUX_PRODUITS_AGRICOLES)
            _cumuler(collectee, TAUX_PRODUITS_AGRICOLES, ht, tva)

    depenses = db.execute(select(DepenseManuelle).where(*entre(DepenseManuelle))).scalars().all()
    for depense in depenses:
        _cumuler(deductible, depense.taux_tva, depense.montant_ht, depense.montant_tva)

    prix_aliments = _prix_aliments(db, user)
    consommations = db.execute(
        select(ConsommationAliment).where(*entre(ConsommationAliment))
    ).scalars().all()
    for consommation in consommations:
        ttc = consommation.quantite * _prix_aliment(consommation, prix_aliments)
        if ttc > 0:
            ht, tva = ventiler_ttc(ttc, TAUX_ALIMENTS_ANIMAUX)
            _cumuler(deductible, TAUX_ALIMENTS_ANIMAUX, ht, tva)

    bloc_collectee = _bloc_tva(collectee)
    bloc_deductible = _bloc_tva(deductible)
    solde = round2(bloc_collectee["total"] - bloc_deductible["total"])
    return {
        "periode": {"annee": annee, "trimestre": trimestre, "debut": debut, "fin": fin},
        "collectee": bloc_collectee,
        "deductible": bloc_deductible,
        "solde": {
            "tva_a_payer": solde if solde > 0 else 0.0,
            "credit_tva": -solde if solde < 0 else 0.0,
        },
        "details": {
            "nb_factures": len(factures),
            "nb_ventes": len(ventes),
            "nb_ventes_elevage": len(ventes_elevage),
            "nb_recoltes_arbres": len(recoltes_arbres),
            "nb_depenses": len(depenses),
            "nb_consommations_aliments": len(consommations),
        },
    }
