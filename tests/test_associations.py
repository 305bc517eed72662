"""
Tests des associations de cultures
"""


def _association(client, headers, **kwargs):
    body = {
        "nom": "Trois soeurs",
        "description": "Maïs, haricot, courge",
        "details": [
            {"espece_id": "Haricot", "requise": True},
            {"famille_id": "Solanacées"},
        ],
    }
    body.update(kwargs)
    return client.post("/api/v1/associations", json=body, headers=headers)


def test_creer_association(client, auth_headers, referentiel):
    resp = _association(client, auth_headers)
    assert resp.status_code == 201
    assert len(resp.json()["details"]) == 2


def test_membre_espece_et_famille_refuse(client, auth_headers, referentiel):
    """Un membre cible soit une espèce soit une famille"""
    resp = _association(
        client,
        auth_headers,
        details=[{"espece_id": "Haricot", "famille_id": "Fabacées"}],
    )
    assert resp.status_code == 400


def test_creer_association_reserve_admin(client, regular_auth_headers, referentiel):
    assert _association(client, regular_auth_headers).status_code == 403


def test_lister_associations_par_espece(client, auth_headers, referentiel):
    """Tomate participe via sa famille"""
    _association(client, auth_headers)
    _association(client, auth_headers, nom="Autre", details=[{"espece_id": "Haricot"}])
    resp = client.get("/api/v1/associations?espece=Tomate", headers=auth_headers)
    assert [a["nom"] for a in resp.json()["items"]] == ["Trois soeurs"]


def test_modifier_association(client, auth_headers, referentiel):
    aid = _association(client, auth_headers).json()["id"]
    resp = client.put(
        f"/api/v1/associations/{aid}",
        json={"details": [{"espece_id": "Tomate"}]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert [d["espece_id"] for d in resp.json()["details"]] == ["Tomate"]


def test_supprimer_association(client, auth_headers, referentiel):
    aid = _association(client, auth_headers).json()["id"]
    assert client.delete(f"/api/v1/associations/{aid}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/associations/{aid}", headers=auth_headers).status_code == 404
