"""
Tests CRUD rotations
"""


def _rotation(client, headers, **kwargs):
    body = {
        "nom": "Rotation 4 ans",
        "nb_annees": 4,
        "details": [
            {"annee": 1, "itp_id": "Tomate plein champ"},
            {"annee": 2},
        ],
    }
    body.update(kwargs)
    return client.post("/api/v1/rotations", json=body, headers=headers)


def test_creer_rotation(client, auth_headers, referentiel):
    resp = _rotation(client, auth_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert [d["annee"] for d in data["details"]] == [1, 2]
    assert data["active"] is True


def test_creer_rotation_annee_en_double(client, auth_headers, referentiel):
    resp = _rotation(client, auth_headers, details=[{"annee": 1}, {"annee": 1}])
    assert resp.status_code == 400


def test_creer_rotation_itp_inexistant(client, auth_headers):
    resp = _rotation(client, auth_headers, details=[{"annee": 1, "itp_id": "Inconnu"}])
    assert resp.status_code == 400


def test_creer_rotation_dupliquee(client, auth_headers, referentiel):
    _rotation(client, auth_headers)
    assert _rotation(client, auth_headers).status_code == 409


def test_modifier_rotation_remplace_details(client, auth_headers, referentiel):
    rid = _rotation(client, auth_headers).json()["id"]
    resp = client.put(
        f"/api/v1/rotations/{rid}",
        json={"details": [{"annee": 3}], "active": False},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [d["annee"] for d in data["details"]] == [3]
    assert data["active"] is False


def test_lister_rotations_filtre_active(client, auth_headers, referentiel):
    _rotation(client, auth_headers)
    _rotation(client, auth_headers, nom="Ancienne", active=False, details=[])
    resp = client.get("/api/v1/rotations?active=false", headers=auth_headers)
    assert [r["nom"] for r in resp.json()["items"]] == ["Ancienne"]


def test_supprimer_rotation_detache_les_planches(client, auth_headers, referentiel):
    rid = _rotation(client, auth_headers).json()["id"]
    client.post(
        "/api/v1/planches", json={"nom": "R1", "rotation_id": rid}, headers=auth_headers
    )
    assert client.delete(f"/api/v1/rotations/{rid}", headers=auth_headers).status_code == 204
    assert client.get("/api/v1/planches/R1", headers=auth_headers).json()["rotation_id"] is None


def test_rotation_d_un_autre_invisible(client, auth_headers, regular_auth_headers, referentiel):
    rid = _rotation(client, auth_headers).json()["id"]
    assert client.get(f"/api/v1/rotations/{rid}", headers=regular_auth_headers).status_code == 404
