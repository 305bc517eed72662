"""
Tests de l'élevage : espèces, lots, animaux, aliments, production, soins, ventes
"""

from datetime import date, timedelta

import pytest

ANNEE = date.today().year


@pytest.fixture()
def poule(client, auth_headers):
    resp = client.post(
        "/api/v1/elevage/especes-animales",
        json={
            "id": "Poule",
            "nom": "Poule",
            "type": "volaille",
            "production": "oeufs",
            "ponte_annuelle": 250,
            "couleur": "#f59e0b",
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.json()


def _lot(client, headers, **kwargs):
    body = {
        "espece_animale_id": "Poule",
        "nom": "Pondeuses",
        "date_arrivee": f"{ANNEE}-02-01",
        "quantite_initiale": 12,
        "prix_achat_total": 40,
    }
    body.update(kwargs)
    return client.post("/api/v1/elevage/lots", json=body, headers=headers)


def _animal(client, headers, **kwargs):
    body = {
        "espece_animale_id": "Poule",
        "nom": "Marguerite",
        "date_arrivee": f"{ANNEE}-03-01",
        "prix_achat": 15,
    }
    body.update(kwargs)
    return client.post("/api/v1/elevage/animaux", json=body, headers=headers)


def _aliment(client, headers, **kwargs):
    body = {"nom": "Blé", "type": "céréale", "prix_defaut": 0.4}
    body.update(kwargs)
    return client.post("/api/v1/elevage/aliments", json=body, headers=headers)


# ── Espèces animales


def test_creer_espece_animale(client, auth_headers, poule):
    assert poule["type"] == "volaille"
    resp = client.get("/api/v1/elevage/especes-animales?type=volaille", headers=auth_headers)
    assert resp.json()["total"] == 1


def test_creer_espece_animale_non_admin(client, regular_auth_headers):
    resp = client.post(
        "/api/v1/elevage/especes-animales",
        json={"id": "Lapin", "nom": "Lapin", "type": "mammifere_petit", "production": "viande"},
        headers=regular_auth_headers,
    )
    assert resp.status_code == 403


def test_creer_espece_animale_type_invalide(client, auth_headers):
    resp = client.post(
        "/api/v1/elevage/especes-animales",
        json={"id": "Dragon", "nom": "Dragon", "type": "reptile", "production": "oeufs"},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_creer_espece_animale_dupliquee(client, auth_headers, poule):
    resp = client.post(
        "/api/v1/elevage/especes-animales",
        json={"id": "Poule", "nom": "Poule", "type": "volaille", "production": "oeufs"},
        headers=auth_headers,
    )
    assert resp.status_code == 409


def test_supprimer_espece_animale_utilisee(client, auth_headers, poule):
    _lot(client, auth_headers)
    resp = client.delete("/api/v1/elevage/especes-animales/Poule", headers=auth_headers)
    assert resp.status_code == 409


# ── Lots et animaux


def test_creer_lot(client, auth_headers, poule):
    """L'effectif actuel part de l'effectif initial"""
    resp = _lot(client, auth_headers)
    assert resp.status_code == 201
    assert resp.json()["quantite_actuelle"] == 12
    assert resp.json()["statut"] == "actif"


def test_creer_lot_espece_inconnue(client, auth_headers):
    assert _lot(client, auth_headers, espece_animale_id="Inconnue").status_code == 400


def test_modifier_lot_reforme(client, auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    resp = client.put(
        f"/api/v1/elevage/lots/{lot_id}",
        json={"quantite_actuelle": 10, "statut": "reforme", "date_reforme": f"{ANNEE}-11-01"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["quantite_actuelle"] == 10
    resp = client.get("/api/v1/elevage/lots?statut=actif", headers=auth_headers)
    assert resp.json()["total"] == 0


def test_supprimer_lot_detache_animaux(client, auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    animal_id = _animal(client, auth_headers, lot_id=lot_id).json()["id"]
    assert client.delete(f"/api/v1/elevage/lots/{lot_id}", headers=auth_headers).status_code == 204
    animal = client.get(f"/api/v1/elevage/animaux/{animal_id}", headers=auth_headers).json()
    assert animal["lot_id"] is None


def test_animal_lot_d_un_autre(client, auth_headers, regular_auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    assert _animal(client, regular_auth_headers, lot_id=lot_id).status_code == 400


def test_lister_animaux_par_lot(client, auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    _animal(client, auth_headers, lot_id=lot_id)
    _animal(client, auth_headers, nom="Roussette")
    resp = client.get(f"/api/v1/elevage/animaux?lot={lot_id}", headers=auth_headers)
    assert [a["nom"] for a in resp.json()["items"]] == ["Marguerite"]


# ── Aliments et distributions


def test_creer_aliment_non_admin(client, regular_auth_headers):
    assert _aliment(client, regular_auth_headers).status_code == 403


def test_creer_aliment_duplique(client, auth_headers):
    _aliment(client, auth_headers)
    assert _aliment(client, auth_headers).status_code == 409


def test_stock_aliment_et_distribution(client, auth_headers, poule):
    """Une distribution décrémente le stock, sa suppression le rétablit"""
    aliment_id = _aliment(client, auth_headers).json()["id"]
    resp = client.put(
        f"/api/v1/elevage/aliments/{aliment_id}/stock",
        json={"stock": 10, "stock_min": 5, "prix": 0.5},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["stock_bas"] is False

    resp = client.post(
        "/api/v1/elevage/consommations-aliments",
        json={"aliment_id": aliment_id, "date": f"{ANNEE}-03-10", "quantite": 6},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    consommation_id = resp.json()["id"]

    liste = client.get("/api/v1/elevage/aliments", headers=auth_headers).json()
    assert liste["items"][0]["stock"] == 4.0
    assert liste["items"][0]["stock_bas"] is True
    assert liste["stock_bas"] == 1

    resp = client.delete(
        f"/api/v1/elevage/consommations-aliments/{consommation_id}", headers=auth_headers
    )
    assert resp.status_code == 204
    liste = client.get("/api/v1/elevage/aliments", headers=auth_headers).json()
    assert liste["items"][0]["stock"] == 10.0


def test_stock_aliment_par_utilisateur(client, auth_headers, regular_auth_headers):
    aliment_id = _aliment(client, auth_headers).json()["id"]
    client.put(
        f"/api/v1/elevage/aliments/{aliment_id}/stock", json={"stock": 10}, headers=auth_headers
    )
    liste = client.get("/api/v1/elevage/aliments", headers=regular_auth_headers).json()
    assert liste["items"][0]["stock"] is None


def test_supprimer_aliment_utilise(client, auth_headers):
    aliment_id = _aliment(client, auth_headers).json()["id"]
    client.post(
        "/api/v1/elevage/consommations-aliments",
        json={"aliment_id": aliment_id, "date": f"{ANNEE}-03-10", "quantite": 1},
        headers=auth_headers,
    )
    resp = client.delete(f"/api/v1/elevage/aliments/{aliment_id}", headers=auth_headers)
    assert resp.status_code == 409


def test_distribution_aliment_inconnu(client, auth_headers):
    resp = client.post(
        "/api/v1/elevage/consommations-aliments",
        json={"aliment_id": 999, "date": f"{ANNEE}-03-10", "quantite": 1},
        headers=auth_headers,
    )
    assert resp.status_code == 400


# ── Production et soins


def test_production_sans_cible(client, auth_headers):
    resp = client.post(
        "/api/v1/elevage/production-oeufs",
        json={"date": f"{ANNEE}-04-10", "quantite": 8},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_lister_production_par_annee(client, auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    for jour in (f"{ANNEE}-04-10", f"{ANNEE - 1}-04-10"):
        client.post(
            "/api/v1/elevage/production-oeufs",
            json={"date": jour, "lot_id": lot_id, "quantite": 8},
            headers=auth_headers,
        )
    resp = client.get(f"/api/v1/elevage/production-oeufs?annee={ANNEE}", headers=auth_headers)
    assert resp.json()["total"] == 1


def test_soins_filtre_fait(client, auth_headers, poule):
    animal_id = _animal(client, auth_headers).json()["id"]
    client.post(
        "/api/v1/elevage/soins",
        json={"animal_id": animal_id, "date": f"{ANNEE}-03-05", "type": "vermifuge"},
        headers=auth_headers,
    )
    client.post(
        "/api/v1/elevage/soins",
        json={
            "animal_id": animal_id,
            "date": f"{ANNEE}-03-05",
            "type": "vaccin",
            "fait": False,
            "date_prevue": f"{ANNEE}-06-01",
        },
        headers=auth_headers,
    )
    resp = client.get("/api/v1/elevage/soins?fait=false", headers=auth_headers)
    assert [s["type"] for s in resp.json()["items"]] == ["vaccin"]


# ── Ventes


def test_vente_prix_total(client, auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    resp = client.post(
        "/api/v1/elevage/ventes",
        json={
            "date": f"{ANNEE}-05-01",
            "type": "oeufs",
            "lot_id": lot_id,
            "quantite": 30,
            "prix_unitaire": 0.4,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    vente = resp.json()
    assert vente["prix_total"] == 12.0

    resp = client.put(
        f"/api/v1/elevage/ventes/{vente['id']}", json={"quantite": 60}, headers=auth_headers
    )
    assert resp.json()["prix_total"] == 24.0


def test_vente_animal_vivant_sort_de_l_effectif(client, auth_headers, poule):
    animal_id = _animal(client, auth_headers).json()["id"]
    client.post(
        "/api/v1/elevage/ventes",
        json={
            "date": f"{ANNEE}-06-15",
            "type": "animal_vivant",
            "animal_id": animal_id,
            "quantite": 1,
            "prix_unitaire": 20,
        },
        headers=auth_headers,
    )
    animal = client.get(f"/api/v1/elevage/animaux/{animal_id}", headers=auth_headers).json()
    assert animal["statut"] == "vendu"
    assert animal["date_sortie"] == f"{ANNEE}-06-15"
    assert animal["cause_sortie"] == "Vente"


def test_lister_ventes_totaux_par_type(client, auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    for type_, quantite, prix in (("oeufs", 30, 0.4), ("oeufs", 12, 0.5), ("viande", 2, 9)):
        client.post(
            "/api/v1/elevage/ventes",
            json={
                "date": f"{ANNEE}-05-01",
                "type": type_,
                "lot_id": lot_id,
                "quantite": quantite,
                "prix_unitaire": prix,
            },
            headers=auth_headers,
        )
    data = client.get(f"/api/v1/elevage/ventes?annee={ANNEE}", headers=auth_headers).json()
    assert data["total"] == 3
    assert data["montant_total"] == 36.0
    assert data["par_type"] == [
        {"type": "oeufs", "total": 18.0, "count": 2},
        {"type": "viande", "total": 18.0, "count": 1},
    ]


# ── Statistiques


def test_stats_elevage(client, auth_headers, poule):
    lot_id = _lot(client, auth_headers).json()["id"]
    _animal(client, auth_headers)

    for jour, quantite in ((f"{ANNEE}-04-10", 30), (f"{ANNEE}-04-20", 20)):
        client.post(
            "/api/v1/elevage/production-oeufs",
            json={"date": jour, "lot_id": lot_id, "quantite": quantite},
            headers=auth_headers,
        )
    client.post(
        "/api/v1/elevage/ventes",
        json={
            "date": f"{ANNEE}-05-01",
            "type": "oeufs",
            "lot_id": lot_id,
            "quantite": 30,
            "prix_unitaire": 0.4,
        },
        headers=auth_headers,
    )
    client.post(
        "/api/v1/elevage/soins",
        json={"lot_id": lot_id, "date": f"{ANNEE}-03-05", "type": "vermifuge", "cout": 25},
        headers=auth_headers,
    )
    client.post(
        "/api/v1/elevage/soins",
        json={
            "lot_id": lot_id,
            "date": f"{ANNEE}-03-05",
            "type": "vaccin",
            "fait": False,
            "date_prevue": (date.today() + timedelta(days=10)).isoformat(),
        },
        headers=auth_headers,
    )
    aliment_id = _aliment(client, auth_headers).json()["id"]
    client.put(
        f"/api/v1/elevage/aliments/{aliment_id}/stock",
        json={"stock": 10, "stock_min": 5, "prix": 0.5},
        headers=auth_headers,
    )
    client.post(
        "/api/v1/elevage/consommations-aliments",
        json={"aliment_id": aliment_id, "lot_id": lot_id, "date": f"{ANNEE}-03-10", "quantite": 6},
        headers=auth_headers,
    )

    resp = client.get(f"/api/v1/elevage/stats?annee={ANNEE}", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["animaux_actifs"] == 1
    assert data["lots_actifs"] == 1
    assert data["effectif_lots"] == 12
    assert data["animaux_par_espece"] == [
        {"espece_animale_id": "Poule", "nom": "Poule", "couleur": "#f59e0b", "count": 1}
    ]
    assert data["oeufs_annee"] == 50
    assert data["oeufs_par_mois"][3] == 50
    assert data["ventes_annee"] == 12.0
    assert data["nb_ventes"] == 1
    assert data["soins_a_planifier"] == 1
    assert data["aliments_stock_bas"] == 1
    # soins 25, aliments 6 x 0,5, achats 15 + 40
    assert data["couts"] == {"soins": 25.0, "aliments": 3.0, "achats": 55.0, "total": 83.0}
