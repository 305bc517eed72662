"""
Tests des référentiels : familles, espèces, variétés, ITP, fournisseurs
"""


# ── Familles


def test_creer_famille(client, auth_headers):
    resp = client.post(
        "/api/v1/familles",
        json={"id": "Apiacées", "intervalle": 3, "couleur": "#f97316"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["intervalle"] == 3


def test_creer_famille_reserve_admin(client, regular_auth_headers):
    """Les référentiels sont lisibles par tous mais modifiables par l'admin seul"""
    resp = client.post(
        "/api/v1/familles", json={"id": "Apiacées"}, headers=regular_auth_headers
    )
    assert resp.status_code == 403


def test_creer_famille_dupliquee(client, auth_headers, referentiel):
    resp = client.post("/api/v1/familles", json={"id": "Solanacées"}, headers=auth_headers)
    assert resp.status_code == 409


def test_creer_famille_couleur_invalide(client, auth_headers):
    resp = client.post(
        "/api/v1/familles", json={"id": "X", "couleur": "rouge"}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_lister_familles_avec_nb_especes(client, regular_auth_headers, referentiel):
    resp = client.get("/api/v1/familles", headers=regular_auth_headers)
    assert resp.status_code == 200
    familles = {f["id"]: f for f in resp.json()["items"]}
    assert familles["Solanacées"]["nb_especes"] == 1


def test_supprimer_famille_utilisee(client, auth_headers, referentiel):
    resp = client.delete("/api/v1/familles/Solanacées", headers=auth_headers)
    assert resp.status_code == 409


def test_modifier_famille(client, auth_headers, referentiel):
    resp = client.put(
        "/api/v1/familles/Fabacées", json={"intervalle": 2}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json()["intervalle"] == 2


# ── Espèces


def test_creer_espece(client, auth_headers, referentiel):
    resp = client.post(
        "/api/v1/especes",
        json={"id": "Aubergine", "famille_id": "Solanacées", "besoin_eau": 4},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["a_planifier"] is True


def test_creer_espece_famille_inexistante(client, auth_headers):
    resp = client.post(
        "/api/v1/especes",
        json={"id": "Mystere", "famille_id": "Inconnues"},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_lister_especes_filtre_famille(client, auth_headers, referentiel):
    resp = client.get("/api/v1/especes?famille=Fabacées", headers=auth_headers)
    assert [e["id"] for e in resp.json()["items"]] == ["Haricot"]


def test_supprimer_espece_utilisee(client, auth_headers, referentiel):
    client.post("/api/v1/cultures", json={"espece_id": "Haricot"}, headers=auth_headers)
    resp = client.delete("/api/v1/especes/Haricot", headers=auth_headers)
    assert resp.status_code == 409


def test_voir_espece_inexistante(client, auth_headers):
    assert client.get("/api/v1/especes/Licorne", headers=auth_headers).status_code == 404


# ── Fournisseurs et variétés


def test_creer_variete_avec_fournisseur(client, auth_headers, referentiel):
    fournisseur = client.post(
        "/api/v1/fournisseurs", json={"nom": "Graines del Païs"}, headers=auth_headers
    ).json()
    resp = client.post(
        "/api/v1/varietes",
        json={
            "id": "Coeur de boeuf",
            "espece_id": "Tomate",
            "fournisseur_id": fournisseur["id"],
            "nb_graines_g": 300,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["fournisseur_id"] == fournisseur["id"]


def test_creer_variete_espece_inexistante(client, auth_headers):
    resp = client.post(
        "/api/v1/varietes", json={"id": "V1", "espece_id": "Licorne"}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_fournisseur_duplique(client, auth_headers):
    client.post("/api/v1/fournisseurs", json={"nom": "Kokopelli"}, headers=auth_headers)
    resp = client.post("/api/v1/fournisseurs", json={"nom": "Kokopelli"}, headers=auth_headers)
    assert resp.status_code == 409


# ── ITP


def test_creer_itp(client, auth_headers, referentiel):
    resp = client.post(
        "/api/v1/itps",
        json={
            "id": "Haricot nain",
            "espece_id": "Haricot",
            "semaine_semis": 20,
            "semaine_recolte": 30,
            "nb_rangs": 3,
            "espacement": 10,
            "espacement_rangs": 30,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["semaine_semis"] == 20


def test_creer_itp_semaine_invalide(client, auth_headers):
    resp = client.post(
        "/api/v1/itps", json={"id": "ITP-X", "semaine_semis": 60}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_lister_itps(client, regular_auth_headers, referentiel):
    resp = client.get("/api/v1/itps", headers=regular_auth_headers)
    assert resp.json()["total"] == 1
