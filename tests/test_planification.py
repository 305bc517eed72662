"""
Tests de la planification : cultures prévues, récoltes, semences, plants
"""

from datetime import date

from app.agronomie.calendrier import date_semaine
from app.services.planification import annee_du_cycle_active

ANNEE = date.today().year


def _planche_en_rotation(client, headers, nom="P1", **kwargs):
    rotation = client.get("/api/v1/rotations", headers=headers).json()["items"]
    if rotation:
        rotation_id = rotation[0]["id"]
    else:
        rotation_id = client.post(
            "/api/v1/rotations",
            json={
                "nom": "Rotation 2 ans",
                "nb_annees": 2,
                "details": [
                    {"annee": 1, "itp_id": "Tomate plein champ"},
                    {"annee": 2},
                ],
            },
            headers=headers,
        ).json()["id"]
    body = {"nom": nom, "largeur": 0.8, "longueur": 10, "rotation_id": rotation_id}
    body.update(kwargs)
    resp = client.post("/api/v1/planches", json=body, headers=headers)
    assert resp.status_code == 201
    return resp.json()


# ── Cycle de rotation


def test_annee_du_cycle_active():
    """Le cycle part de annee - 10 : l'année N est active si (11 - N) est un multiple de nb_annees"""
    for annee in (ANNEE, ANNEE + 1, ANNEE + 7):
        assert annee_du_cycle_active(1, 2, annee)
        assert not annee_du_cycle_active(2, 2, annee)
        assert annee_du_cycle_active(2, 3, annee)
        assert not annee_du_cycle_active(1, 3, annee)
        assert not annee_du_cycle_active(3, 3, annee)
        assert annee_du_cycle_active(1, 1, annee)


# ── Cultures prévues


def test_cultures_prevues(client, auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers, ilot="Nord")
    resp = client.get(
        f"/api/v1/planification/cultures-prevues?annee={ANNEE}", headers=auth_headers
    )
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 1
    prevue = data[0]
    assert prevue["espece_id"] == "Tomate"
    assert prevue["rotation_annee"] == 1
    assert prevue["surface"] == 8.0
    assert prevue["nb_plants"] == 40
    assert prevue["existe"] is False


def test_annee_du_cycle_sans_itp(client, auth_headers, referentiel):
    """Sur 3 ans, seule la deuxième année est active, et elle n'a pas d'ITP"""
    rotation_id = client.post(
        "/api/v1/rotations",
        json={
            "nom": "Rotation 3 ans",
            "nb_annees": 3,
            "details": [
                {"annee": 1, "itp_id": "Tomate plein champ"},
                {"annee": 2},
                {"annee": 3},
            ],
        },
        headers=auth_headers,
    ).json()["id"]
    client.post(
        "/api/v1/planches",
        json={"nom": "P3", "largeur": 1, "longueur": 5, "rotation_id": rotation_id},
        headers=auth_headers,
    )
    data = client.get(
        f"/api/v1/planification/cultures-prevues?annee={ANNEE + 1}", headers=auth_headers
    ).json()
    assert len(data) == 1
    assert data[0]["rotation_annee"] == 2
    assert data[0]["espece_id"] is None
    assert data[0]["nb_plants"] == 0


def test_planche_sans_rotation_ignoree(client, auth_headers, referentiel):
    client.post(
        "/api/v1/planches", json={"nom": "Libre", "largeur": 1, "longueur": 5}, headers=auth_headers
    )
    data = client.get(
        f"/api/v1/planification/cultures-prevues?annee={ANNEE}", headers=auth_headers
    ).json()
    assert data == []


def test_cultures_prevues_isolees(client, auth_headers, regular_auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers)
    data = client.get(
        f"/api/v1/planification/cultures-prevues?annee={ANNEE}", headers=regular_auth_headers
    ).json()
    assert data == []


# ── Récoltes, semences et plants


def test_recoltes_prevues_par_mois(client, auth_headers, referentiel):
    """Récolte semaine 28 → juillet, 8 m² x 4 kg/m²"""
    _planche_en_rotation(client, auth_headers)
    data = client.get(
        f"/api/v1/planification/recoltes-prevues?annee={ANNEE}", headers=auth_headers
    ).json()
    assert len(data) == 12
    juillet = data[6]
    assert juillet["periode"] == "Juillet"
    assert juillet["total_kg"] == 32.0
    assert juillet["especes"][0]["espece_id"] == "Tomate"
    assert sum(p["total_kg"] for p in data) == 32.0


def test_recoltes_prevues_par_semaine(client, auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers)
    data = client.get(
        f"/api/v1/planification/recoltes-prevues?annee={ANNEE}&par=semaine",
        headers=auth_headers,
    ).json()
    assert len(data) == 52
    assert data[27]["periode"] == "S28"
    assert data[27]["total_kg"] == 32.0


def test_besoins_semences(client, auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers)
    data = client.get(
        f"/api/v1/planification/semences?annee={ANNEE}", headers=auth_headers
    ).json()
    assert len(data) == 1
    assert data[0]["nb_plants"] == 40
    assert data[0]["surface_totale"] == 8.0


def test_besoins_plants_avec_marge(client, auth_headers, referentiel):
    """40 plants + 10 % → 44 à commander"""
    _planche_en_rotation(client, auth_headers)
    data = client.get(
        f"/api/v1/planification/plants?annee={ANNEE}", headers=auth_headers
    ).json()
    assert len(data) == 1
    assert data[0]["semaine_plantation"] == 18
    assert data[0]["a_commander"] == 44
    assert data[0]["cultures"][0]["planche"] == "P1"


# ── Associations


def test_associations_prevues(client, auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers, planches_influencees="P2, Inconnue")
    _planche_en_rotation(client, auth_headers, nom="P2")
    client.post(
        "/api/v1/associations",
        json={"nom": "Solanacées et haricot", "details": [{"famille_id": "Solanacées"}]},
        headers=auth_headers,
    )
    data = client.get(
        f"/api/v1/planification/associations?annee={ANNEE}", headers=auth_headers
    ).json()
    p1 = next(a for a in data if a["planche"] == "P1")
    assert p1["planches_voisines"] == ["P2", "Inconnue"]
    assert p1["cultures_voisines"] == [{"planche": "P2", "espece_id": "Tomate"}]
    assert [a["nom"] for a in p1["associations"]] == ["Solanacées et haricot"]
    assert p1["semaine"] == 18


# ── Création des cultures


def test_creer_cultures(client, auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers)
    resp = client.post(
        "/api/v1/planification/creer-cultures", json={"annee": ANNEE}, headers=auth_headers
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["creees"] == 1
    assert data["ignorees"] == 0

    culture = client.get(f"/api/v1/cultures/{data['cultures'][0]}", headers=auth_headers).json()
    assert culture["espece_id"] == "Tomate"
    assert culture["date_plantation"] == date_semaine(ANNEE, 18).isoformat()


def test_creer_cultures_idempotent(client, auth_headers, referentiel):
    """Une culture existante n'est pas recréée"""
    _planche_en_rotation(client, auth_headers)
    client.post(
        "/api/v1/planification/creer-cultures", json={"annee": ANNEE}, headers=auth_headers
    )
    resp = client.post(
        "/api/v1/planification/creer-cultures", json={"annee": ANNEE}, headers=auth_headers
    )
    assert resp.json()["creees"] == 0
    assert resp.json()["ignorees"] == 1

    prevues = client.get(
        f"/api/v1/planification/cultures-prevues?annee={ANNEE}", headers=auth_headers
    ).json()
    assert prevues[0]["existe"] is True


def test_creer_cultures_selection_planches(client, auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers)
    p2 = _planche_en_rotation(client, auth_headers, nom="P2")
    resp = client.post(
        "/api/v1/planification/creer-cultures",
        json={"annee": ANNEE, "planche_ids": [p2["id"]]},
        headers=auth_headers,
    )
    assert resp.json()["creees"] == 1


def test_stats_planification(client, auth_headers, referentiel):
    _planche_en_rotation(client, auth_headers)
    client.post(
        "/api/v1/planification/creer-cultures", json={"annee": ANNEE}, headers=auth_headers
    )
    data = client.get(
        f"/api/v1/planification/stats?annee={ANNEE}", headers=auth_headers
    ).json()
    assert data["total_cultures"] == 1
    assert data["cultures_existantes"] == 1
    assert data["cultures_a_creer"] == 0
    assert data["surface_totale"] == 8.0
    assert data["recoltes_totales"] == 32.0
    assert data["nb_especes"] == 1
