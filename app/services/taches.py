"""
Service des tâches et du calendrier
Semis, plantations, récoltes et arrosages d'une période donnée
"""

from datetime import date, datetime, timedelta

from fastapi import HTTPException
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models import Culture, Espece, IrrigationPlanifiee, User

# (type, colonne de date, drapeau "fait")
ETAPES = (
    ("semis", "date_semis", "semis_fait"),
    ("plantation", "date_plantation", "plantation_faite"),
    ("recolte", "date_recolte", "recolte_faite"),
)
JOURS_SANS_EAU = 2
BESOIN_EAU_ELEVE = 3


def _check_periode(debut: date, fin: date) -> None:
    if debut > fin:
        raise HTTPException(
            status_code=400, detail="La date de début doit précéder la date de fin"
        )


def _etapes(db: Session, user: User, debut: date, fin: date) -> dict[str, list[dict]]:
    """Cultures dont une étape tombe dans la période, par type d'étape"""
    etapes = {}
    for type_etape, champ_date, champ_fait in ETAPES:
        colonne = getattr(Culture, champ_date)
        cultures = db.execute(
            select(Culture)
            .where(Culture.user_id == user.id, colonne >= debut, colonne <= fin)
            .order_by(colonne, Culture.id)
        ).scalars()
        etapes[type_etape] = [
            {
                "id": culture.id,
                "type": type_etape,
                "espece_id": culture.espece_id,
                "variete_id": culture.variete_id,
                "planche_id": culture.planche_id,
                "planche": culture.planche.nom if culture.planche else None,
                "date": getattr(culture, champ_date),
                "fait": getattr(culture, champ_fait),
                "couleur": culture.espece.couleur if culture.espece else None,
            }
            for culture in cultures
        ]
    return etapes


def _sans_eau(db: Session, user: User) -> list[dict]:
    """
    Cultures plantées de l'année, assoiffées et pas arrosées depuis deux jours

    Les jamais arrosées passent en premier, puis les plus anciennes, par îlot.
    """
    maintenant = datetime.utcnow()
    limite = maintenant - timedelta(days=JOURS_SANS_EAU)
    cultures = db.execute(
        select(Culture)
        .join(Espece, Culture.espece_id == Espece.id)
        .where(
            Culture.user_id == user.id,
            Culture.annee == maintenant.year,
            Culture.terminee.is_(None),
            Culture.plantation_faite.is_(True),
            or_(Culture.a_irriguer.is_(True), Espece.besoin_eau >= BESOIN_EAU_ELEVE),
            or_(Culture.derniere_irrigation.is_(None), Culture.derniere_irrigation < limite),
        )
    ).scalars().all()

    items = []
    for culture in cultures:
        derniere = culture.derniere_irrigation
        items.append(
            {
                "id": culture.id,
                "espece_id": culture.espece_id,
                "planche_id": culture.planche_id,
                "ilot": culture.planche.ilot if culture.planche else None,
                "derniere_irrigation": derniere,
                "jours_depuis": (maintenant - derniere).days if derniere else None,
                "couleur": culture.espece.couleur,
            }
        )
    items.sort(
        key=lambda c: (
            c["derniere_irrigation"] is not None,
            c["derniere_irrigation"] or datetime.min,
            c["ilot"] or "",
        )
    )
    return items


def taches(db: Session, *, user: User, debut: date, fin: date) -> dict:
    """Tâches de la période et cultures à arroser aujourd'hui"""
    _check_periode(debut, fin)
    etapes = _etapes(db, user, debut, fin)
    irrigation = _sans_eau(db, user)
    return {
        "debut": debut,
        "fin": fin,
        "semis": etapes["semis"],
        "plantations": etapes["plantation"],
        "recoltes": etapes["recolte"],
        "irrigation": irrigation,
        "stats": {
            "semis_prevus": len(etapes["semis"]),
            "semis_faits": sum(1 for e in etapes["semis"] if e["fait"]),
            "plantations_prevues": len(etapes["plantation"]),
            "plantations_faites": sum(1 for e in etapes["plantation"] if e["fait"]),
            "recoltes_prevues": len(etapes["recolte"]),
            "recoltes_faites": sum(1 for e in etapes["recolte"] if e["fait"]),
            "a_irriguer": len(irrigation),
        },
    }


def calendrier(db: Session, *, user: User, debut: date, fin: date) -> dict:
    """Événements de la période triés par date, irrigations planifiées comprises"""
    _check_periode(debut, fin)
    etapes = _etapes(db, user, debut, fin)

    irrigations = db.execute(
        select(IrrigationPlanifiee)
        .where(
            IrrigationPlanifiee.user_id == user.id,
            IrrigationPlanifiee.date_prevue >= debut,
            IrrigationPlanifiee.date_prevue <= fin,
        )
        .order_by(IrrigationPlanifiee.date_prevue, IrrigationPlanifiee.id)
    ).scalars().all()

    # l'id d'une irrigation est le sien, la culture est dans culture_id
    events = etapes["semis"] + etapes["plantation"] + etapes["recolte"]
    for irrigation in irrigations:
        culture = irrigation.culture
        events.append(
            {
                "id": irrigation.id,
                "type": "irrigation",
                "espece_id": culture.espece_id,
                "variete_id": culture.variete_id,
                "planche_id": culture.planche_id,
                "planche": culture.planche.nom if culture.planche else None,
                "date": irrigation.date_prevue,
                "fait": irrigation.fait,
                "couleur": culture.espece.couleur if culture.espece else None,
                "culture_id": culture.id,
            }
        )
    events.sort(key=lambda e: e["date"])

    return {
        "events": events,
        "stats": {
            "semis": len(etapes["semis"]),
            "plantations": len(etapes["plantation"]),
            "recoltes": len(etapes["recolte"]),
            "irrigations": len(irrigations),
            "total": len(events),
        },
    }
