"""
Tests des cultures : CRUD, validation des dates, occupation et arrosage
"""

from datetime import date

ANNEE = date.today().year


def _planche(client, headers, nom="P1", **kwargs):
    body = {"nom": nom, "largeur": 0.8, "longueur": 10}
    body.update(kwargs)
    return client.post("/api/v1/planches", json=body, headers=headers).json()


def _culture(client, headers, **kwargs):
    body = {"espece_id": "Tomate", "annee": ANNEE}
    body.update(kwargs)
    return client.post("/api/v1/cultures", json=body, headers=headers)


# ── Créer une culture


def test_creer_culture(client, auth_headers, referentiel):
    resp = _culture(client, auth_headers, date_semis=f"{ANNEE}-03-05")
    assert resp.status_code == 201
    data = resp.json()
    assert data["etat"] == "Planifiée"
    assert data["type"] == "Non défini"
    assert data["avertissements"] == []


def test_creer_culture_espece_inexistante(client, auth_headers, referentiel):
    resp = _culture(client, auth_headers, espece_id="Licorne")
    assert resp.status_code == 400


def test_creer_culture_planche_d_un_autre(client, auth_headers, regular_auth_headers, referentiel):
    planche = _planche(client, auth_headers)
    resp = _culture(client, regular_auth_headers, planche_id=planche["id"])
    assert resp.status_code == 400


def test_creer_culture_dates_incoherentes(client, auth_headers, referentiel):
    """Semis après plantation → 400"""
    resp = _culture(
        client,
        auth_headers,
        date_semis=f"{ANNEE}-05-01",
        date_plantation=f"{ANNEE}-04-01",
    )
    assert resp.status_code == 400
    assert "semis" in resp.json()["detail"]


def test_creer_culture_avertissement_itp(client, auth_headers, referentiel):
    """Un semis éloigné de la semaine ITP est accepté avec un avertissement"""
    resp = _culture(
        client,
        auth_headers,
        itp_id="Tomate plein champ",
        date_semis=f"{ANNEE}-06-01",
    )
    assert resp.status_code == 201
    data = resp.json()
    assert len(data["avertissements"]) == 1
    # densite reprise de l'ITP
    assert data["nb_rangs"] == 2
    assert data["espacement_rangs"] == 60


def test_creer_culture_planche_pleine(client, auth_headers, referentiel):
    """La deuxième culture ne tient plus en largeur → 400 avec ajustements"""
    planche = _planche(client, auth_headers)
    first = _culture(
        client, auth_headers, planche_id=planche["id"], itp_id="Tomate plein champ"
    )
    assert first.status_code == 201

    resp = _culture(
        client, auth_headers, planche_id=planche["id"], nb_rangs=2, espacement_rangs=30
    )
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert "Largeur insuffisante" in detail["message"]
    assert detail["ajustements"]


def test_culture_terminee_libere_la_planche(client, auth_headers, referentiel):
    planche = _planche(client, auth_headers)
    first = _culture(
        client, auth_headers, planche_id=planche["id"], itp_id="Tomate plein champ"
    ).json()
    client.put(f"/api/v1/cultures/{first['id']}", json={"terminee": "x"}, headers=auth_headers)

    resp = _culture(
        client, auth_headers, planche_id=planche["id"], nb_rangs=2, espacement_rangs=30
    )
    assert resp.status_code == 201


# ── Lister


def test_lister_cultures_par_etat(client, auth_headers, referentiel):
    _culture(client, auth_headers)
    _culture(client, auth_headers, espece_id="Haricot", semis_fait=True)
    _culture(client, auth_headers, espece_id="Haricot", terminee="x")

    resp = client.get("/api/v1/cultures?etat=Semée", headers=auth_headers)
    assert resp.json()["total"] == 1
    resp = client.get("/api/v1/cultures?etat=en_cours", headers=auth_headers)
    assert resp.json()["total"] == 2
    resp = client.get("/api/v1/cultures?etat=terminees", headers=auth_headers)
    assert resp.json()["items"][0]["etat"] == "Terminée"


def test_lister_cultures_recherche_par_planche(client, auth_headers, referentiel):
    planche = _planche(client, auth_headers, nom="Serre-1")
    _culture(client, auth_headers, espece_id="Haricot", planche_id=planche["id"])
    _culture(client, auth_headers, espece_id="Haricot")
    resp = client.get("/api/v1/cultures?search=serre", headers=auth_headers)
    assert resp.json()["total"] == 1


def test_cultures_isolees_par_utilisateur(client, auth_headers, regular_auth_headers, referentiel):
    culture = _culture(client, auth_headers).json()
    assert client.get("/api/v1/cultures", headers=regular_auth_headers).json()["total"] == 0
    resp = client.get(f"/api/v1/cultures/{culture['id']}", headers=regular_auth_headers)
    assert resp.status_code == 404


# ── Modifier et supprimer


def test_modifier_culture_etat(client, auth_headers, referentiel):
    culture = _culture(client, auth_headers).json()
    resp = client.put(
        f"/api/v1/cultures/{culture['id']}",
        json={"semis_fait": True, "plantation_faite": True},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["etat"] == "Plantée"


def test_supprimer_culture_detache_les_recoltes(client, auth_headers, referentiel):
    culture = _culture(client, auth_headers).json()
    recolte = client.post(
        "/api/v1/recoltes",
        json={
            "espece_id": "Tomate",
            "culture_id": culture["id"],
            "date": f"{ANNEE}-08-01",
            "quantite": 3,
        },
        headers=auth_headers,
    ).json()

    resp = client.delete(f"/api/v1/cultures/{culture['id']}", headers=auth_headers)
    assert resp.status_code == 204
    resp = client.get(f"/api/v1/recoltes/{recolte['id']}", headers=auth_headers)
    assert resp.json()["culture_id"] is None


# ── Arrosage


def test_cultures_a_irriguer(client, auth_headers, referentiel):
    """Tomate (besoin 4) retenue d'office, haricot seulement si marqué"""
    planche = _planche(client, auth_headers, ilot="Nord")
    _culture(client, auth_headers, planche_id=planche["id"], nb_rangs=1, longueur=5)
    _culture(client, auth_headers, espece_id="Haricot")

    resp = client.get("/api/v1/cultures/irriguer", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["stats"]["total"] == 1
    tomate = data["cultures"][0]
    assert tomate["urgence"] == "critique"
    assert tomate["jours_sans_eau"] is None
    # 5 m x 0,8 m, base 15 L pour une espece exigeante
    assert tomate["consommation_eau_semaine"] == 60.0
    assert list(data["par_ilot"]) == ["Nord"]


def test_arroser_maintenant(client, auth_headers, referentiel):
    culture = _culture(client, auth_headers).json()
    resp = client.patch(
        "/api/v1/cultures/irriguer",
        json={"action": "arroser", "culture_id": culture["id"]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["modifiees"] == 1

    data = client.get("/api/v1/cultures/irriguer", headers=auth_headers).json()
    assert data["cultures"][0]["jours_sans_eau"] == 0
    assert data["cultures"][0]["urgence"] == "faible"


def test_basculer_a_irriguer(client, auth_headers, referentiel):
    culture = _culture(client, auth_headers, espece_id="Haricot").json()
    client.patch(
        "/api/v1/cultures/irriguer",
        json={"action": "basculer", "culture_ids": [culture["id"]]},
        headers=auth_headers,
    )
    data = client.get("/api/v1/cultures/irriguer", headers=auth_headers).json()
    assert [c["id"] for c in data["cultures"]] == [culture["id"]]


def test_irriguer_sans_culture(client, auth_headers):
    resp = client.patch(
        "/api/v1/cultures/irriguer", json={"action": "arroser"}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_modifier_culture_null_sur_champ_obligatoire(client, auth_headers, referentiel):
    """Un null explicite sur un booléen obligatoire est ignoré"""
    culture = _culture(client, auth_headers, semis_fait=True).json()
    resp = client.put(
        f"/api/v1/cultures/{culture['id']}",
        json={"semis_fait": None, "a_irriguer": None, "notes": "paillage"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["semis_fait"] is True
    assert resp.json()["a_irriguer"] is False
    assert resp.json()["notes"] == "paillage"
