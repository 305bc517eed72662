"""
Tests des stocks et des consommations
"""

from datetime import date

ANNEE = date.today().year


def _consommation(client, headers, **kwargs):
    body = {"espece_id": "Tomate", "date": f"{ANNEE}-07-20", "quantite": 1.5, "destination": "Vente"}
    body.update(kwargs)
    return client.post("/api/v1/consommations", json=body, headers=headers)


def _recolte(client, headers, **kwargs):
    body = {"espece_id": "Tomate", "date": f"{ANNEE}-07-15", "quantite": 4.5}
    body.update(kwargs)
    return client.post("/api/v1/recoltes", json=body, headers=headers)


# ── Stocks


def test_stocks_vides(client, auth_headers, referentiel):
    """Sans mouvement, aucune espèce n'est listée"""
    resp = client.get("/api/v1/stocks", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == []


def test_stock_net(client, auth_headers, referentiel):
    """Inventaire 2 + récolte 4,5 - consommation 1,5"""
    _recolte(client, auth_headers)
    _consommation(client, auth_headers)
    data = client.get("/api/v1/stocks", headers=auth_headers).json()
    assert [s["espece_id"] for s in data] == ["Tomate"]
    assert data[0]["stock_net"] == 5.0
    assert data[0]["detail"] == {"inventaire": 2.0, "recoltes": 4.5, "consommations": 1.5}


def test_stock_inventaire_utilisateur(client, auth_headers, referentiel):
    """Les mouvements antérieurs à l'inventaire ne comptent plus"""
    _recolte(client, auth_headers)
    resp = client.put(
        "/api/v1/stocks/Tomate",
        json={"inventaire": 10, "date_inventaire": f"{ANNEE}-08-01"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["stock_net"] == 10.0

    _consommation(client, auth_headers, date=f"{ANNEE}-08-10")
    data = client.get("/api/v1/stocks", headers=auth_headers).json()
    assert data[0]["stock_net"] == 8.5


def test_stock_inventaire_espece_inconnue(client, auth_headers, referentiel):
    resp = client.put("/api/v1/stocks/Inconnue", json={"inventaire": 1}, headers=auth_headers)
    assert resp.status_code == 404


def test_stocks_isoles(client, auth_headers, regular_auth_headers, referentiel):
    _recolte(client, auth_headers)
    assert client.get("/api/v1/stocks", headers=regular_auth_headers).json() == []


# ── Consommations


def test_creer_consommation(client, auth_headers, referentiel):
    resp = _consommation(client, auth_headers)
    assert resp.status_code == 201
    assert resp.json()["destination"] == "Vente"


def test_creer_consommation_quantite_nulle(client, auth_headers, referentiel):
    assert _consommation(client, auth_headers, quantite=0).status_code == 400


def test_creer_consommation_espece_inconnue(client, auth_headers, referentiel):
    assert _consommation(client, auth_headers, espece_id="Inconnue").status_code == 400


def test_lister_consommations_filtres(client, auth_headers, referentiel):
    _consommation(client, auth_headers)
    _consommation(client, auth_headers, espece_id="Haricot", date=f"{ANNEE}-09-01")

    resp = client.get("/api/v1/consommations?espece=Haricot", headers=auth_headers)
    assert resp.json()["total"] == 1

    resp = client.get(
        f"/api/v1/consommations?date_from={ANNEE}-08-01", headers=auth_headers
    )
    assert [c["espece_id"] for c in resp.json()["items"]] == ["Haricot"]


def test_modifier_consommation(client, auth_headers, referentiel):
    cid = _consommation(client, auth_headers).json()["id"]
    resp = client.put(
        f"/api/v1/consommations/{cid}", json={"quantite": 3, "prix": 6.5}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json()["quantite"] == 3.0
    assert resp.json()["prix"] == 6.5


def test_supprimer_consommation(client, auth_headers, referentiel):
    cid = _consommation(client, auth_headers).json()["id"]
    assert client.delete(f"/api/v1/consommations/{cid}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/consommations/{cid}", headers=auth_headers).status_code == 404


def test_consommation_d_un_autre(client, auth_headers, regular_auth_headers, referentiel):
    cid = _consommation(client, auth_headers).json()["id"]
    resp = client.get(f"/api/v1/consommations/{cid}", headers=regular_auth_headers)
    assert resp.status_code == 404
