"""
Tests des irrigations planifiées et du générateur de calendrier
"""

from datetime import date

ANNEE = date.today().year


def _culture(client, headers, **kwargs):
    body = {"espece_id": "Tomate", "annee": ANNEE, "a_irriguer": True}
    body.update(kwargs)
    return client.post("/api/v1/cultures", json=body, headers=headers).json()


def test_creer_irrigation(client, auth_headers, referentiel):
    culture = _culture(client, auth_headers)
    resp = client.post(
        "/api/v1/irrigations",
        json={"culture_id": culture["id"], "date_prevue": f"{ANNEE}-06-01"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["fait"] is False


def test_creer_irrigation_culture_inexistante(client, auth_headers):
    resp = client.post(
        "/api/v1/irrigations",
        json={"culture_id": 9999, "date_prevue": f"{ANNEE}-06-01"},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_irrigation_faite_met_a_jour_la_culture(client, auth_headers, referentiel):
    culture = _culture(client, auth_headers)
    irrigation = client.post(
        "/api/v1/irrigations",
        json={"culture_id": culture["id"], "date_prevue": f"{ANNEE}-06-01"},
        headers=auth_headers,
    ).json()

    resp = client.put(
        f"/api/v1/irrigations/{irrigation['id']}",
        json={"fait": True, "date_effective": f"{ANNEE}-06-01T08:00:00"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    resp = client.get(f"/api/v1/cultures/{culture['id']}", headers=auth_headers)
    assert resp.json()["derniere_irrigation"] == f"{ANNEE}-06-01T08:00:00"


def test_generer_irrigations(client, auth_headers, referentiel):
    """Tomate (besoin 4) : un arrosage tous les 2 jours entre plantation et récolte"""
    culture = _culture(
        client,
        auth_headers,
        date_plantation=f"{ANNEE}-05-01",
        date_recolte=f"{ANNEE}-05-11",
    )
    _culture(client, auth_headers, espece_id="Haricot")  # sans date : ignoree

    resp = client.post(
        "/api/v1/irrigations/generer", json={"annee": ANNEE}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "cultures_traitees": 1,
        "cultures_ignorees": 1,
        "irrigations_creees": 5,
    }

    resp = client.get(f"/api/v1/irrigations?culture={culture['id']}", headers=auth_headers)
    dates = [i["date_prevue"] for i in resp.json()["items"]]
    assert dates[0] == f"{ANNEE}-05-03"
    assert dates[-1] == f"{ANNEE}-05-11"


def test_generer_sans_force_conserve_l_existant(client, auth_headers, referentiel):
    _culture(
        client,
        auth_headers,
        date_plantation=f"{ANNEE}-05-01",
        date_recolte=f"{ANNEE}-05-11",
    )
    client.post("/api/v1/irrigations/generer", json={"annee": ANNEE}, headers=auth_headers)

    resp = client.post(
        "/api/v1/irrigations/generer", json={"annee": ANNEE}, headers=auth_headers
    )
    assert resp.json()["cultures_ignorees"] == 1
    assert resp.json()["irrigations_creees"] == 0

    resp = client.post(
        "/api/v1/irrigations/generer",
        json={"annee": ANNEE, "force": True},
        headers=auth_headers,
    )
    assert resp.json()["irrigations_creees"] == 5
    assert client.get("/api/v1/irrigations", headers=auth_headers).json()["total"] == 5


def test_irrigations_filtre_fait(client, auth_headers, referentiel):
    culture = _culture(client, auth_headers)
    for jour, fait in (("01", True), ("02", False)):
        client.post(
            "/api/v1/irrigations",
            json={
                "culture_id": culture["id"],
                "date_prevue": f"{ANNEE}-06-{jour}",
                "fait": fait,
            },
            headers=auth_headers,
        )
    resp = client.get("/api/v1/irrigations?fait=false", headers=auth_headers)
    assert [i["date_prevue"] for i in resp.json()["items"]] == [f"{ANNEE}-06-02"]


def test_irrigation_faite_date_avec_fuseau(client, auth_headers, referentiel):
    """Une date effective avec fuseau est ramenée en UTC sans fuseau"""
    culture = _culture(client, auth_headers)
    client.patch(
        "/api/v1/cultures/irriguer",
        json={"action": "arroser", "culture_id": culture["id"]},
        headers=auth_headers,
    )
    resp = client.post(
        "/api/v1/irrigations",
        json={
            "culture_id": culture["id"],
            "date_prevue": f"{ANNEE}-06-01",
            "fait": True,
            "date_effective": f"{ANNEE}-06-01T08:00:00Z",
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["date_effective"] == f"{ANNEE}-06-01T08:00:00"

    resp = client.put(
        f"/api/v1/irrigations/{resp.json()['id']}",
        json={"date_effective": f"{ANNEE}-06-02T08:00:00+02:00"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["date_effective"] == f"{ANNEE}-06-02T06:00:00"
