"""
Tests du tableau de bord
"""

from datetime import date

ANNEE = date.today().year


def _jardin(client, headers):
    p1 = client.post(
        "/api/v1/planches", json={"nom": "P1", "largeur": 0.8, "longueur": 10}, headers=headers
    ).json()
    client.post(
        "/api/v1/planches", json={"nom": "P2", "largeur": 1, "longueur": 5}, headers=headers
    )
    tomate = client.post(
        "/api/v1/cultures",
        json={
            "espece_id": "Tomate",
            "planche_id": p1["id"],
            "annee": ANNEE,
            "date_semis": f"{ANNEE}-03-05",
            "date_plantation": f"{ANNEE}-05-01",
        },
        headers=headers,
    ).json()
    client.post(
        "/api/v1/cultures",
        json={"espece_id": "Haricot", "annee": ANNEE, "terminee": "x"},
        headers=headers,
    )
    for body in (
        {"espece_id": "Tomate", "culture_id": tomate["id"], "date": f"{ANNEE}-07-15", "quantite": 12},
        {"espece_id": "Haricot", "date": f"{ANNEE}-08-01", "quantite": 3},
        {"espece_id": "Tomate", "date": f"{ANNEE - 1}-07-10", "quantite": 5},
    ):
        client.post("/api/v1/recoltes", json=body, headers=headers)
    return tomate


def test_dashboard_stats(client, auth_headers, referentiel):
    _jardin(client, auth_headers)
    resp = client.get(f"/api/v1/dashboard?year={ANNEE}", headers=auth_headers)
    assert resp.status_code == 200
    stats = resp.json()["stats"]
    assert stats == {
        "cultures_total": 2,
        "cultures_actives": 1,
        "planches": 2,
        "surface_totale": 13.0,
        "especes": 2,
        "arbres": 0,
        "recoltes_annee": 15.0,
        "recoltes_count": 2,
        "recoltes_annee_precedente": 5.0,
    }


def test_dashboard_graphiques(client, auth_headers, referentiel):
    _jardin(client, auth_headers)
    charts = client.get(f"/api/v1/dashboard?year={ANNEE}", headers=auth_headers).json()["charts"]

    mensuelles = charts["recoltes_mensuelles"]
    assert len(mensuelles) == 12
    assert mensuelles[6] == {"mois": "Juil", "quantite": 12.0}
    assert mensuelles[7] == {"mois": "Août", "quantite": 3.0}

    # couleur de l'espèce, sinon celle de la famille
    assert charts["recoltes_par_espece"] == [
        {"espece": "Tomate", "quantite": 12.0, "couleur": "#dc2626"},
        {"espece": "Haricot", "quantite": 3.0, "couleur": "#84cc16"},
    ]

    familles = {f["famille"]: f for f in charts["cultures_par_famille"]}
    assert familles["Solanacées"] == {"famille": "Solanacées", "count": 1, "couleur": "#ef4444"}
    assert familles["Fabacées"]["count"] == 1

    assert charts["etat_cultures"] == {"en_cours": 1, "terminees": 1, "total": 2}
    assert charts["rendement_par_planche"] == [
        {"planche": "P1", "total_kg": 12.0, "surface": 8.0, "rendement": 1.5}
    ]


def test_dashboard_taches_a_venir(client, auth_headers, referentiel):
    tomate = _jardin(client, auth_headers)
    upcoming = client.get(f"/api/v1/dashboard?year={ANNEE}", headers=auth_headers).json()["upcoming"]
    assert [(t["action"], t["date"]) for t in upcoming] == [
        ("semis", f"{ANNEE}-03-05"),
        ("plantation", f"{ANNEE}-05-01"),
    ]
    assert upcoming[0]["culture_id"] == tomate["id"]
    assert upcoming[0]["planche"] == "P1"


def test_dashboard_vide(client, regular_auth_headers):
    data = client.get("/api/v1/dashboard", headers=regular_auth_headers).json()
    assert data["annee"] == ANNEE
    assert data["stats"]["cultures_total"] == 0
    assert data["charts"]["recoltes_par_espece"] == []
    assert data["upcoming"] == []


def test_dashboard_sans_authentification(client):
    assert client.get("/api/v1/dashboard").status_code == 401
