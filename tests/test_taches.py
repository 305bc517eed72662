"""
Tests des tâches de la période et du calendrier
"""

from datetime import date

ANNEE = date.today().year


def _jardin(client, headers):
    planche = client.post(
        "/api/v1/planches",
        json={"nom": "P1", "largeur": 0.8, "longueur": 10, "ilot": "Nord"},
        headers=headers,
    ).json()
    tomate = client.post(
        "/api/v1/cultures",
        json={
            "espece_id": "Tomate",
            "planche_id": planche["id"],
            "annee": ANNEE,
            "date_semis": f"{ANNEE}-03-05",
            "date_plantation": f"{ANNEE}-05-01",
            "date_recolte": f"{ANNEE}-07-15",
            "semis_fait": True,
            "plantation_faite": True,
        },
        headers=headers,
    ).json()
    haricot = client.post(
        "/api/v1/cultures",
        json={
            "espece_id": "Haricot",
            "annee": ANNEE,
            "date_semis": f"{ANNEE}-03-10",
            "plantation_faite": True,
        },
        headers=headers,
    ).json()
    return tomate, haricot


# ── Tâches


def test_taches_de_la_periode(client, auth_headers, referentiel):
    tomate, haricot = _jardin(client, auth_headers)
    resp = client.get(
        f"/api/v1/taches?start={ANNEE}-03-01&end={ANNEE}-03-31", headers=auth_headers
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [(s["id"], s["fait"]) for s in data["semis"]] == [
        (tomate["id"], True),
        (haricot["id"], False),
    ]
    assert data["semis"][0]["planche"] == "P1"
    assert data["semis"][0]["couleur"] == "#dc2626"
    assert data["plantations"] == []
    assert data["stats"]["semis_prevus"] == 2
    assert data["stats"]["semis_faits"] == 1
    assert data["stats"]["recoltes_prevues"] == 0


def test_taches_cultures_a_arroser(client, auth_headers, referentiel):
    """Tomate (besoin 4) plantée et jamais arrosée, le haricot (besoin 2) non"""
    tomate, _ = _jardin(client, auth_headers)
    data = client.get(
        f"/api/v1/taches?start={ANNEE}-03-01&end={ANNEE}-03-31", headers=auth_headers
    ).json()
    assert [c["id"] for c in data["irrigation"]] == [tomate["id"]]
    assert data["irrigation"][0]["ilot"] == "Nord"
    assert data["irrigation"][0]["jours_depuis"] is None
    assert data["stats"]["a_irriguer"] == 1

    client.patch(
        "/api/v1/cultures/irriguer",
        json={"action": "arroser", "culture_id": tomate["id"]},
        headers=auth_headers,
    )
    data = client.get(
        f"/api/v1/taches?start={ANNEE}-03-01&end={ANNEE}-03-31", headers=auth_headers
    ).json()
    assert data["irrigation"] == []


def test_taches_periode_invalide(client, auth_headers):
    resp = client.get(
        f"/api/v1/taches?start={ANNEE}-04-01&end={ANNEE}-03-01", headers=auth_headers
    )
    assert resp.status_code == 400


def test_taches_dates_requises(client, auth_headers):
    resp = client.get(f"/api/v1/taches?start={ANNEE}-04-01", headers=auth_headers)
    assert resp.status_code == 400


def test_taches_isolees(client, auth_headers, regular_auth_headers, referentiel):
    _jardin(client, auth_headers)
    data = client.get(
        f"/api/v1/taches?start={ANNEE}-01-01&end={ANNEE}-12-31", headers=regular_auth_headers
    ).json()
    assert data["semis"] == []
    assert data["irrigation"] == []


# ── Calendrier


def test_calendrier_evenements_tries(client, auth_headers, referentiel):
    tomate, haricot = _jardin(client, auth_headers)
    irrigation = client.post(
        "/api/v1/irrigations",
        json={"culture_id": tomate["id"], "date_prevue": f"{ANNEE}-06-01"},
        headers=auth_headers,
    ).json()

    resp = client.get(
        f"/api/v1/calendrier?start={ANNEE}-03-01&end={ANNEE}-06-30", headers=auth_headers
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [(e["type"], e["date"]) for e in data["events"]] == [
        ("semis", f"{ANNEE}-03-05"),
        ("semis", f"{ANNEE}-03-10"),
        ("plantation", f"{ANNEE}-05-01"),
        ("irrigation", f"{ANNEE}-06-01"),
    ]
    assert data["events"][1]["id"] == haricot["id"]
    assert data["events"][3]["id"] == irrigation["id"]
    assert data["events"][3]["culture_id"] == tomate["id"]
    assert data["stats"] == {
        "semis": 2,
        "plantations": 1,
        "recoltes": 0,
        "irrigations": 1,
        "total": 4,
    }


def test_calendrier_sans_authentification(client):
    resp = client.get(f"/api/v1/calendrier?start={ANNEE}-03-01&end={ANNEE}-03-31")
    assert resp.status_code == 401
