"""
Tests des récoltes
"""

from datetime import date

ANNEE = date.today().year


def _recolte(client, headers, **kwargs):
    body = {"espece_id": "Tomate", "date": f"{ANNEE}-07-15", "quantite": 4.5}
    body.update(kwargs)
    return client.post("/api/v1/recoltes", json=body, headers=headers)


def test_creer_recolte(client, auth_headers, referentiel):
    resp = _recolte(client, auth_headers)
    assert resp.status_code == 201
    assert resp.json()["quantite"] == 4.5


def test_creer_recolte_quantite_negative(client, auth_headers, referentiel):
    assert _recolte(client, auth_headers, quantite=-1).status_code == 400


def test_creer_recolte_culture_d_un_autre(client, auth_headers, regular_auth_headers, referentiel):
    culture = client.post(
        "/api/v1/cultures", json={"espece_id": "Tomate"}, headers=auth_headers
    ).json()
    resp = _recolte(client, regular_auth_headers, culture_id=culture["id"])
    assert resp.status_code == 400


def test_lister_recoltes_total_quantite(client, auth_headers, referentiel):
    _recolte(client, auth_headers)
    _recolte(client, auth_headers, quantite=2.25, date=f"{ANNEE}-08-01")
    _recolte(client, auth_headers, espece_id="Haricot", quantite=1)
    _recolte(client, auth_headers, quantite=10, date=f"{ANNEE - 1}-08-01")

    resp = client.get(f"/api/v1/recoltes?annee={ANNEE}&espece=Tomate", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert data["total_quantite"] == 6.75
    # plus recentes d'abord
    assert data["items"][0]["date"] == f"{ANNEE}-08-01"


def test_modifier_recolte(client, auth_headers, referentiel):
    rid = _recolte(client, auth_headers).json()["id"]
    resp = client.put(f"/api/v1/recoltes/{rid}", json={"quantite": 6}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["quantite"] == 6


def test_supprimer_recolte(client, auth_headers, referentiel):
    rid = _recolte(client, auth_headers).json()["id"]
    assert client.delete(f"/api/v1/recoltes/{rid}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/recoltes/{rid}", headers=auth_headers).status_code == 404
