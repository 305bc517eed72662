"""
Tests du verger : arbres, récoltes, opérations et statistiques
"""

from datetime import date

ANNEE = date.today().year


def _arbre(client, headers, **kwargs):
    body = {
        "nom": "Pommier 1",
        "type": "fruitier",
        "espece": "Pommier",
        "variete": "Reinette",
        "prix_achat": 25,
        "date_plantation": f"{ANNEE - 2}-11-20",
    }
    body.update(kwargs)
    return client.post("/api/v1/arbres", json=body, headers=headers)


def _recolte(client, headers, arbre_id, **kwargs):
    body = {"arbre_id": arbre_id, "date": f"{ANNEE}-09-15", "quantite": 20}
    body.update(kwargs)
    return client.post("/api/v1/arbres/recoltes", json=body, headers=headers)


def _operation(client, headers, arbre_id, **kwargs):
    body = {"arbre_id": arbre_id, "type": "taille", "date": f"{ANNEE}-02-10"}
    body.update(kwargs)
    return client.post("/api/v1/arbres/operations", json=body, headers=headers)


# ── Arbres


def test_creer_arbre(client, auth_headers):
    resp = _arbre(client, auth_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["envergure"] == 2.0
    assert data["productif"] is False


def test_creer_arbre_type_invalide(client, auth_headers):
    assert _arbre(client, auth_headers, type="cactus").status_code == 400


def test_lister_arbres_filtres(client, auth_headers):
    _arbre(client, auth_headers, productif=True)
    _arbre(client, auth_headers, nom="Cassis", type="petit_fruit", espece="Cassissier", variete=None)

    resp = client.get("/api/v1/arbres?type=petit_fruit", headers=auth_headers)
    assert [a["nom"] for a in resp.json()["items"]] == ["Cassis"]

    resp = client.get("/api/v1/arbres?productif=true", headers=auth_headers)
    assert [a["nom"] for a in resp.json()["items"]] == ["Pommier 1"]

    resp = client.get("/api/v1/arbres?search=reinette", headers=auth_headers)
    assert resp.json()["total"] == 1


def test_modifier_arbre(client, auth_headers):
    arbre_id = _arbre(client, auth_headers).json()["id"]
    resp = client.put(
        f"/api/v1/arbres/{arbre_id}",
        json={"productif": True, "pos_x": 12.5, "pos_y": 4},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["productif"] is True
    assert resp.json()["pos_x"] == 12.5


def test_arbre_d_un_autre(client, auth_headers, regular_auth_headers):
    arbre_id = _arbre(client, auth_headers).json()["id"]
    resp = client.get(f"/api/v1/arbres/{arbre_id}", headers=regular_auth_headers)
    assert resp.status_code == 404


def test_supprimer_arbre_supprime_recoltes(client, auth_headers):
    arbre_id = _arbre(client, auth_headers).json()["id"]
    _recolte(client, auth_headers, arbre_id)
    _operation(client, auth_headers, arbre_id)
    assert client.delete(f"/api/v1/arbres/{arbre_id}", headers=auth_headers).status_code == 204
    assert client.get("/api/v1/arbres/recoltes", headers=auth_headers).json()["total"] == 0
    assert client.get("/api/v1/arbres/operations", headers=auth_headers).json()["total"] == 0


# ── Récoltes et opérations


def test_recolte_arbre_d_un_autre(client, auth_headers, regular_auth_headers):
    arbre_id = _arbre(client, auth_headers).json()["id"]
    assert _recolte(client, regular_auth_headers, arbre_id).status_code == 400


def test_lister_recoltes_filtres(client, auth_headers):
    arbre_id = _arbre(client, auth_headers).json()["id"]
    _recolte(client, auth_headers, arbre_id)
    _recolte(client, auth_headers, arbre_id, date=f"{ANNEE - 1}-09-15", statut="vendu")

    resp = client.get(f"/api/v1/arbres/recoltes?annee={ANNEE}", headers=auth_headers)
    assert resp.json()["total"] == 1
    resp = client.get("/api/v1/arbres/recoltes?statut=vendu", headers=auth_headers)
    assert resp.json()["items"][0]["date"] == f"{ANNEE - 1}-09-15"


def test_modifier_recolte_arbre(client, auth_headers):
    arbre_id = _arbre(client, auth_headers).json()["id"]
    recolte_id = _recolte(client, auth_headers, arbre_id).json()["id"]
    resp = client.put(
        f"/api/v1/arbres/recoltes/{recolte_id}",
        json={"statut": "vendu", "prix_kg": 2.5},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["statut"] == "vendu"


def test_operations_a_faire(client, auth_headers):
    arbre_id = _arbre(client, auth_headers).json()["id"]
    _operation(client, auth_headers, arbre_id)
    operation_id = _operation(
        client, auth_headers, arbre_id, type="traitement", fait=False, date_prevue=f"{ANNEE}-04-01"
    ).json()["id"]

    resp = client.get("/api/v1/arbres/operations?fait=false", headers=auth_headers)
    assert [o["type"] for o in resp.json()["items"]] == ["traitement"]

    client.put(f"/api/v1/arbres/operations/{operation_id}", json={"fait": True}, headers=auth_headers)
    resp = client.get("/api/v1/arbres/operations?fait=false", headers=auth_headers)
    assert resp.json()["total"] == 0


# ── Statistiques


def test_stats_verger(client, auth_headers):
    pommier = _arbre(client, auth_headers, productif=True).json()["id"]
    _arbre(client, auth_headers, nom="Cassis", type="petit_fruit")
    _recolte(client, auth_headers, pommier, statut="vendu", prix_kg=2.5)
    _recolte(client, auth_headers, pommier, quantite=5)
    _operation(client, auth_headers, pommier, cout=12)
    _operation(client, auth_headers, pommier, type="traitement", fait=False, cout=8)

    resp = client.get(f"/api/v1/arbres/stats?annee={ANNEE}", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["nb_arbres"] == 2
    assert data["par_type"] == {"fruitier": 1, "petit_fruit": 1}
    assert data["productifs"] == 1
    assert data["recolte_kg"] == 25.0
    assert data["nb_recoltes"] == 2
    assert data["valeur_vendue"] == 50.0
    assert data["cout_operations"] == 20.0
    assert data["operations_a_faire"] == 1
