"""
Service de planification des cultures
Déduit des rotations affectées aux planches les cultures attendues pour une
année, puis les récoltes, semences et plants correspondants.
"""

import logging
import math
from collections import defaultdict
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.agronomie.calendrier import MOIS, calculer_nb_plants, date_semaine, semaine_vers_mois
from app.models import (
    Association,
    AssociationDetail,
    Culture,
    Espece,
    Itp,
    Planche,
    User,
    Variete,
)
from app.services.audit import log_action
from app.utils import round2

logger = logging.getLogger(__name__)

DECALAGE_BASE = 10  # les rotations sont supposees commencees depuis au plus 10 ans
CYCLES_MAX = 20
MARGE_GRAINES = 1.2
MARGE_PLANTS = 1.1


def annee_du_cycle_active(annee_cycle: int, nb_annees: int, annee: int) -> bool:
    """Vrai si l'année N du cycle tombe sur l'année demandée"""
    annee_base = annee - DECALAGE_BASE
    for decalage in range(CYCLES_MAX + 1):
        if annee_base + decalage * nb_annees + (annee_cycle - 1) == annee:
            return True
    return False


def cultures_prevues(
    db: Session,
    *,
    user: User,
    annee: int,
    planche_ids: Optional[list[int]] = None,
) -> list[dict]:
    """Cultures attendues sur chaque planche suivant une rotation"""
    stmt = select(Planche).where(Planche.user_id == user.id, Planche.rotation_id.is_not(None))
    if planche_ids:
        stmt = stmt.where(Planche.id.in_(planche_ids))
    planches = db.execute(stmt.order_by(Planche.nom)).scalars().all()

    existantes = defaultdict(list)
    for culture in db.execute(
        select(Culture).where(Culture.user_id == user.id, Culture.annee == annee)
    ).scalars():
        existantes[culture.planche_id].append(culture)

    prevues = []
    for planche in planches:
        rotation = planche.rotation
        if rotation is None or not rotation.details:
            continue
        nb_annees = rotation.nb_annees or len(rotation.details)

        for detail in rotation.details:
            if not annee_du_cycle_active(detail.annee, nb_annees, annee):
                continue
            itp = detail.itp
            espece_id = itp.espece_id if itp else None
            existante = next(
                (
                    c
                    for c in existantes[planche.id]
                    if (detail.itp_id and c.itp_id == detail.itp_id)
                    or (espece_id and c.espece_id == espece_id)
                ),
                None,
            )
            nb_rangs = itp.nb_rangs if itp else None
            espacement = itp.espacement if itp else None
            prevues.append(
                {
                    "planche_id": planche.id,
                    "planche": planche.nom,
                    "planche_longueur": planche.longueur,
                    "planche_largeur": planche.largeur,
                    "ilot": planche.ilot,
                    "rotation_id": rotation.id,
                    "rotation_annee": detail.annee,
                    "itp_id": detail.itp_id,
                    "espece_id": espece_id,
                    "espece_couleur": itp.espece.couleur if itp and itp.espece else None,
                    "variete_id": None,
                    "annee": annee,
                    "semaine_semis": itp.semaine_semis if itp else None,
                    "semaine_plantation": itp.semaine_plantation if itp else None,
                    "semaine_recolte": itp.semaine_recolte if itp else None,
                    "duree_culture": itp.duree_culture if itp else None,
                    "nb_rangs": nb_rangs,
                    "espacement": espacement,
                    "surface": (planche.longueur or 0) * (planche.largeur or 0),
                    "nb_plants": calculer_nb_plants(planche.longueur, nb_rangs, espacement),
                    "existe": existante is not None,
                    "culture_id": existante.id if existante else None,
                }
            )
    return prevues


def recoltes_prevues(db: Session, *, user: User, annee: int, par: str = "mois") -> list[dict]:
    """Quantités attendues (surface x rendement) par mois ou par semaine"""
    prevues = cultures_prevues(db, user=user, annee=annee)
    rendements = {
        e.id: e.rendement or 0
        for e in db.execute(
            select(Espece).where(Espece.id.in_({c["espece_id"] for c in prevues if c["espece_id"]}))
        ).scalars()
    }

    periodes: dict[int, dict[str, dict]] = defaultdict(dict)
    for culture in prevues:
        if not culture["semaine_recolte"] or not culture["espece_id"]:
            continue
        num = (
            semaine_vers_mois(culture["semaine_recolte"])
            if par == "mois"
            else culture["semaine_recolte"]
        )
        groupe = periodes[num].setdefault(
            culture["espece_id"],
            {
                "espece_id": culture["espece_id"],
                "espece_couleur": culture["espece_couleur"],
                "quantite": 0.0,
                "surface": 0.0,
            },
        )
        groupe["quantite"] += culture["surface"] * rendements.get(culture["espece_id"], 0)
        groupe["surface"] += culture["surface"]

    nb_periodes = 12 if par == "mois" else 52
    result = []
    for num in range(1, nb_periodes + 1):
        especes = list(periodes.get(num, {}).values())
        result.append(
            {
                "periode": MOIS[num - 1] if par == "mois" else f"S{num}",
                "periode_num": num,
                "especes": especes,
                "total_kg": sum(e["quantite"] for e in especes),
                "total_surface": sum(e["surface"] for e in especes),
            }
        )
    return result


def besoins_semences(db: Session, *, user: User, annee: int) -> list[dict]:
    """Graines à prévoir par espèce et variété, avec 20 % de marge"""
    varietes = {v.id: v for v in db.execute(select(Variete)).scalars()}
    besoins: dict[str, dict] = {}

    for culture in cultures_prevues(db, user=user, annee=annee):
        if not culture["espece_id"]:
            continue
        cle = f"{culture['espece_id']}|{culture['variete_id'] or ''}"
        if cle not in besoins:
            variete = varietes.get(culture["variete_id"]) if culture["variete_id"] else None
            besoins[cle] = {
                "espece_id": culture["espece_id"],
                "espece_couleur": culture["espece_couleur"],
                "variete_id": culture["variete_id"],
                "surface_totale": 0.0,
                "nb_plants": 0,
                "graines_necessaires": 0,
                "stock_actuel": (variete.stock_graines if variete else None) or 0,
                "nb_graines_g": variete.nb_graines_g if variete else None,
                "a_commander": 0,
            }
        besoin = besoins[cle]
        besoin["surface_totale"] += culture["surface"]
        besoin["nb_plants"] += culture["nb_plants"]

    for besoin in besoins.values():
        if besoin["nb_graines_g"]:
            besoin["graines_necessaires"] = math.ceil(
                round(besoin["nb_plants"] * MARGE_GRAINES / besoin["nb_graines_g"], 6)
            )
        besoin["a_commander"] = max(0, besoin["graines_necessaires"] - besoin["stock_actuel"])

    return sorted(besoins.values(), key=lambda b: b["espece_id"])


def besoins_plants(db: Session, *, user: User, annee: int) -> list[dict]:
    """Plants à prévoir pour les cultures plantées, avec 10 % de marge"""
    varietes = {v.id: v for v in db.execute(select(Variete)).scalars()}
    besoins: dict[str, dict] = {}

    for culture in cultures_prevues(db, user=user, annee=annee):
        if culture["semaine_plantation"] is None or not culture["espece_id"]:
            continue
        cle = f"{culture['espece_id']}|{culture['variete_id'] or ''}"
        if cle not in besoins:
            variete = varietes.get(culture["variete_id"]) if culture["variete_id"] else None
            besoins[cle] = {
                "espece_id": culture["espece_id"],
                "espece_couleur": culture["espece_couleur"],
                "variete_id": culture["variete_id"],
                "nb_plants": 0,
                "semaine_plantation": culture["semaine_plantation"],
                "stock_actuel": (variete.stock_plants if variete else None) or 0,
                "a_commander": 0,
                "cultures": [],
            }
        besoin = besoins[cle]
        besoin["nb_plants"] += culture["nb_plants"]
        besoin["cultures"].append(
            {
                "planche": culture["planche"],
                "surface": culture["surface"],
                "nb_plants": culture["nb_plants"],
            }
        )

    for besoin in besoins.values():
        avec_marge = math.ceil(round(besoin["nb_plants"] * MARGE_PLANTS, 6))
        besoin["a_commander"] = max(0, avec_marge - besoin["stock_actuel"])

    return sorted(besoins.values(), key=lambda b: b["espece_id"])


def associations_prevues(db: Session, *, user: User, annee: int) -> list[dict]:
    """Voisinage des cultures prévues et associations connues de chaque espèce"""
    prevues = cultures_prevues(db, user=user, annee=annee)
    par_planche = {c["planche"]: c for c in prevues}
    influences = {
        p.nom: p.planches_influencees
        for p in db.execute(select(Planche).where(Planche.user_id == user.id)).scalars()
    }

    result = []
    for culture in prevues:
        brut = influences.get(culture["planche"]) or ""
        voisines = [nom.strip() for nom in brut.split(",") if nom.strip()]
        result.append(
            {
                "planche": culture["planche"],
                "ilot": culture["ilot"],
                "espece_id": culture["espece_id"],
                "semaine": culture["semaine_plantation"] or culture["semaine_semis"],
                "planches_voisines": voisines,
                "cultures_voisines": [
                    {"planche": nom, "espece_id": par_planche[nom]["espece_id"]}
                    for nom in voisines
                    if nom in par_planche
                ],
                "associations": _associations_espece(db, culture["espece_id"]),
            }
        )
    return result


def _associations_espece(db: Session, espece_id: Optional[str]) -> list[dict]:
    if not espece_id:
        return []
    espece = db.get(Espece, espece_id)
    cibles = [AssociationDetail.espece_id == espece_id]
    if espece and espece.famille_id:
        cibles.append(AssociationDetail.famille_id == espece.famille_id)
    associations = db.execute(
        select(Association)
        .where(
            Association.id.in_(
                select(AssociationDetail.association_id).where(or_(*cibles))
            )
        )
        .order_by(Association.nom)
    ).scalars()
    return [{"id": a.id, "nom": a.nom} for a in associations]


def creer_cultures(
    db: Session,
    *,
    user: User,
    annee: int,
    planche_ids: Optional[list[int]] = None,
    ip_address: Optional[str] = None,
) -> dict:
    """
    Crée les cultures prévues qui n'existent pas encore

    Une culture est ignorée si (planche, espèce, année) existe déjà pour
    l'utilisateur. Les dates viennent des semaines de l'ITP.
    """
    creees: list[int] = []
    ignorees = 0
    for prevue in cultures_prevues(db, user=user, annee=annee, planche_ids=planche_ids):
        itp = db.get(Itp, prevue["itp_id"]) if prevue["itp_id"] else None
        if itp is None or not itp.espece_id:
            ignorees += 1
            continue

        existe = db.execute(
            select(Culture.id).where(
                Culture.user_id == user.id,
                Culture.planche_id == prevue["planche_id"],
                Culture.espece_id == itp.espece_id,
                Culture.annee == annee,
            )
        ).first()
        if existe:
            ignorees += 1
            continue

        culture = Culture(
            user_id=user.id,
            espece_id=itp.espece_id,
            itp_id=itp.id,
            planche_id=prevue["planche_id"],
            annee=annee,
            date_semis=date_semaine(annee, itp.semaine_semis) if itp.semaine_semis else None,
            date_plantation=(
                date_semaine(annee, itp.semaine_plantation) if itp.semaine_plantation else None
            ),
            date_recolte=(
                date_semaine(annee, itp.semaine_recolte) if itp.semaine_recolte else None
            ),
            nb_rangs=itp.nb_rangs,
            espacement=itp.espacement,
            espacement_rangs=itp.espacement_rangs,
        )
        db.add(culture)
        db.flush()
        creees.append(culture.id)

    log_action(
        db,
        user_id=user.id,
        action="CREATE",
        resource_type="culture",
        resource_id=",".join(str(i) for i in creees) or None,
        details={"planification": annee, "creees": len(creees), "ignorees": ignorees},
        ip_address=ip_address,
    )
    logger.info("Planification %s : %d culture(s) créée(s)", annee, len(creees))
    return {"creees": len(creees), "ignorees": ignorees, "cultures": creees}


def stats_planification(db: Session, *, user: User, annee: int) -> dict:
    prevues = cultures_prevues(db, user=user, annee=annee)
    recoltes = recoltes_prevues(db, user=user, annee=annee, par="mois")
    existantes = sum(1 for c in prevues if c["existe"])
    return {
        "annee": annee,
        "total_cultures": len(prevues),
        "cultures_existantes": existantes,
        "cultures_a_creer": len(prevues) - existantes,
        "surface_totale": round2(sum(c["surface"] for c in prevues)),
        "recoltes_totales": round2(sum(r["total_kg"] for r in recoltes)),
        "nb_especes": len({c["espece_id"] for c in prevues if c["espece_id"]}),
    }
