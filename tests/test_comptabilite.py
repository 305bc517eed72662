"""
Tests de la comptabilité : clients, factures, dépenses, ventes manuelles
"""

from datetime import date

ANNEE = date.today().year


def _client(client, headers, **kwargs):
    body = {
        "nom": "Épicerie Dupont",
        "type": "professionnel",
        "adresse": "3 rue des Lilas",
        "code_postal": "35000",
        "ville": "Rennes",
    }
    body.update(kwargs)
    return client.post("/api/v1/comptabilite/clients", json=body, headers=headers)


def _facture(client, headers, **kwargs):
    body = {
        "date": f"{ANNEE}-03-10",
        "client_nom": "Marché de Rennes",
        "lignes": [{"description": "Tomates", "quantite": 10, "unite": "kg", "prix_unitaire": 4}],
    }
    body.update(kwargs)
    return client.post("/api/v1/comptabilite/factures", json=body, headers=headers)


# ── Clients


def test_creer_client(client, auth_headers):
    resp = _client(client, auth_headers)
    assert resp.status_code == 201
    assert resp.json()["pays"] == "France"


def test_lister_clients_recherche(client, auth_headers):
    _client(client, auth_headers)
    _client(client, auth_headers, nom="AMAP du Lac", ville="Vitré", type="association")
    resp = client.get("/api/v1/comptabilite/clients?search=vitr", headers=auth_headers)
    assert [c["nom"] for c in resp.json()["items"]] == ["AMAP du Lac"]


def test_client_d_un_autre(client, auth_headers, regular_auth_headers):
    client_id = _client(client, auth_headers).json()["id"]
    resp = client.get(f"/api/v1/comptabilite/clients/{client_id}", headers=regular_auth_headers)
    assert resp.status_code == 404


def test_supprimer_client_conserve_factures(client, auth_headers):
    client_id = _client(client, auth_headers).json()["id"]
    facture_id = _facture(client, auth_headers, client_id=client_id).json()["id"]
    resp = client.delete(f"/api/v1/comptabilite/clients/{client_id}", headers=auth_headers)
    assert resp.status_code == 204

    facture = client.get(f"/api/v1/comptabilite/factures/{facture_id}", headers=auth_headers).json()
    assert facture["client_id"] is None
    assert facture["client_nom"] == "Épicerie Dupont"


# ── Factures


def test_creer_facture_montants(client, auth_headers):
    """10 kg x 4 € HT, TVA 5,5 %"""
    resp = _facture(client, auth_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["numero"] == f"F-{ANNEE}-0001"
    assert data["statut"] == "brouillon"
    assert data["montant_ht"] == 40.0
    assert data["montant_tva"] == 2.2
    assert data["montant_ttc"] == 42.2
    assert data["lignes"][0]["ordre"] == 1


def test_numerotation_par_type(client, auth_headers):
    _facture(client, auth_headers)
    assert _facture(client, auth_headers).json()["numero"] == f"F-{ANNEE}-0002"
    assert _facture(client, auth_headers, type="avoir").json()["numero"] == f"AV-{ANNEE}-0001"


def test_numerotation_par_utilisateur(client, auth_headers, regular_auth_headers):
    _facture(client, auth_headers)
    assert _facture(client, regular_auth_headers).json()["numero"] == f"F-{ANNEE}-0001"


def test_facture_copie_client(client, auth_headers):
    client_id = _client(client, auth_headers).json()["id"]
    data = _facture(client, auth_headers, client_id=client_id, client_nom=None).json()
    assert data["client_nom"] == "Épicerie Dupont"
    assert data["client_adresse"] == "3 rue des Lilas, 35000 Rennes"


def test_facture_client_exonere(client, auth_headers):
    client_id = _client(client, auth_headers, exonerer_tva=True).json()["id"]
    data = _facture(client, auth_headers, client_id=client_id).json()
    assert data["montant_tva"] == 0.0
    assert data["montant_ttc"] == 40.0


def test_facture_sans_client(client, auth_headers):
    assert _facture(client, auth_headers, client_nom=None).status_code == 400


def test_facture_sans_ligne(client, auth_headers):
    assert _facture(client, auth_headers, lignes=[]).status_code == 400


def test_modifier_facture_lignes(client, auth_headers):
    facture_id = _facture(client, auth_headers).json()["id"]
    resp = client.put(
        f"/api/v1/comptabilite/factures/{facture_id}",
        json={
            "lignes": [
                {"description": "Oeufs", "quantite": 2, "prix_unitaire": 10, "taux_tva": 0},
                {"description": "Miel", "quantite": 1, "prix_unitaire": 8, "taux_tva": 0},
            ]
        },
        headers=auth_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [ligne["ordre"] for ligne in data["lignes"]] == [1, 2]
    assert data["montant_ttc"] == 28.0


def test_facture_payee_date_paiement(client, auth_headers):
    facture_id = _facture(client, auth_headers, statut="emise").json()["id"]
    resp = client.put(
        f"/api/v1/comptabilite/factures/{facture_id}", json={"statut": "payee"}, headers=auth_headers
    )
    assert resp.json()["date_paiement"] == date.today().isoformat()


def test_annuler_facture(client, auth_headers):
    """Une facture annulée reste consultable mais n'est plus modifiable"""
    facture_id = _facture(client, auth_headers).json()["id"]
    resp = client.delete(f"/api/v1/comptabilite/factures/{facture_id}", headers=auth_headers)
    assert resp.status_code == 204

    facture = client.get(f"/api/v1/comptabilite/factures/{facture_id}", headers=auth_headers)
    assert facture.json()["statut"] == "annulee"

    resp = client.put(
        f"/api/v1/comptabilite/factures/{facture_id}", json={"notes": "x"}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_lister_factures_totaux_sans_annulees(client, auth_headers):
    _facture(client, auth_headers)
    facture_id = _facture(client, auth_headers).json()["id"]
    client.delete(f"/api/v1/comptabilite/factures/{facture_id}", headers=auth_headers)

    data = client.get(f"/api/v1/comptabilite/factures?annee={ANNEE}", headers=auth_headers).json()
    assert data["total"] == 2
    assert data["totaux"] == {"ht": 40.0, "tva": 2.2, "ttc": 42.2}


# ── Dépenses et ventes manuelles


def test_creer_depense_ventilation_tva(client, auth_headers):
    resp = client.post(
        "/api/v1/comptabilite/depenses-manuelles",
        json={"date": f"{ANNEE}-03-15", "categorie": "semences", "module": "potager", "montant": 120},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["montant_ht"] == 100.0
    assert resp.json()["montant_tva"] == 20.0


def test_modifier_depense_recalcule(client, auth_headers):
    depense_id = client.post(
        "/api/v1/comptabilite/depenses-manuelles",
        json={"date": f"{ANNEE}-03-15", "categorie": "outillage", "montant": 120},
        headers=auth_headers,
    ).json()["id"]
    resp = client.put(
        f"/api/v1/comptabilite/depenses-manuelles/{depense_id}",
        json={"taux_tva": 0},
        headers=auth_headers,
    )
    assert resp.json()["montant_ht"] == 120.0
    assert resp.json()["montant_tva"] == 0.0


def test_lister_depenses_filtres(client, auth_headers):
    for categorie, paye in (("semences", True), ("carburant", False)):
        client.post(
            "/api/v1/comptabilite/depenses-manuelles",
            json={"date": f"{ANNEE}-03-15", "categorie": categorie, "montant": 10, "paye": paye},
            headers=auth_headers,
        )
    resp = client.get("/api/v1/comptabilite/depenses-manuelles?paye=false", headers=auth_headers)
    assert [d["categorie"] for d in resp.json()["items"]] == ["carburant"]


def test_vente_manuelle_quantite_prix(client, auth_headers):
    resp = client.post(
        "/api/v1/comptabilite/ventes-manuelles",
        json={"date": f"{ANNEE}-06-01", "categorie": "légumes", "quantite": 10, "prix_unitaire": 2},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["montant"] == 20.0
    assert data["montant_ht"] == 18.96
    assert data["montant_tva"] == 1.04


def test_vente_manuelle_sans_montant(client, auth_headers):
    resp = client.post(
        "/api/v1/comptabilite/ventes-manuelles",
        json={"date": f"{ANNEE}-06-01", "categorie": "légumes"},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_vente_manuelle_client(client, auth_headers):
    client_id = _client(client, auth_headers).json()["id"]
    resp = client.post(
        "/api/v1/comptabilite/ventes-manuelles",
        json={"date": f"{ANNEE}-06-01", "categorie": "légumes", "montant": 15, "client_id": client_id},
        headers=auth_headers,
    )
    assert resp.json()["client_nom"] == "Épicerie Dupont"


# ── Statistiques


def test_stats_comptabilite(client, auth_headers):
    _facture(client, auth_headers, statut="emise")
    _facture(client, auth_headers)  # brouillon, non comptabilisée
    client.post(
        "/api/v1/comptabilite/ventes-manuelles",
        json={
            "date": f"{ANNEE}-06-01",
            "categorie": "légumes",
            "module": "potager",
            "montant": 20,
            "paye": False,
        },
        headers=auth_headers,
    )
    client.post(
        "/api/v1/comptabilite/depenses-manuelles",
        json={"date": f"{ANNEE}-03-15", "categorie": "semences", "module": "potager", "montant": 120},
        headers=auth_headers,
    )
    client.post(
        "/api/v1/arbres",
        json={
            "nom": "Pommier",
            "type": "fruitier",
            "prix_achat": 30,
            "date_plantation": f"{ANNEE}-01-20",
        },
        headers=auth_headers,
    )

    resp = client.get(f"/api/v1/comptabilite/stats?annee={ANNEE}", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["revenus"] == {"potager": 20.0, "elevage": 0.0, "verger": 0.0, "general": 42.2}
    assert data["depenses"] == {"potager": 120.0, "elevage": 0.0, "verger": 30.0, "general": 0.0}
    assert data["total_revenus"] == 62.2
    assert data["total_depenses"] == 150.0
    assert data["benefice"] == -87.8
    assert data["marge"] < 0
    assert data["tva_collectee"] == 3.24
    assert data["tva_deductible"] == 20.0
    assert data["tva_solde"] == -16.76

    mensuel = {m["mois"]: m for m in data["mensuel"]}
    assert mensuel["Jan"]["depenses"] == 30.0
    assert mensuel["Mar"] == {"mois": "Mar", "revenus": 42.2, "depenses": 120.0}
    assert mensuel["Juin"]["revenus"] == 20.0

    assert data["impayes"]["factures"] == 42.2
    assert data["impayes"]["nb_factures"] == 1
    assert data["impayes"]["ventes"] == 20.0
    assert data["impayes"]["nb_ventes"] == 1


# ── Déclaration de TVA


def _mouvements_tva(client, headers):
    _facture(client, headers, statut="emise")
    _facture(client, headers)  # brouillon, ignoré
    for body in (
        {"date": f"{ANNEE}-06-01", "categorie": "légumes", "montant": 20},
        {"date": f"{ANNEE}-06-02", "categorie": "bois", "montant": 11, "taux_tva": 10},
        {"date": f"{ANNEE}-06-03", "categorie": "dons", "montant": 5, "taux_tva": 0},
    ):
        client.post("/api/v1/comptabilite/ventes-manuelles", json=body, headers=headers)
    client.post(
        "/api/v1/comptabilite/depenses-manuelles",
        json={"date": f"{ANNEE}-03-15", "categorie": "semences", "montant": 120},
        headers=headers,
    )


def test_resume_tva_annuel(client, auth_headers):
    _mouvements_tva(client, auth_headers)
    resp = client.get(f"/api/v1/comptabilite/tva?annee={ANNEE}", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()

    collectee = data["collectee"]
    assert collectee["par_taux"] == {
        "5.5": {"base": 58.96, "tva": 3.24},
        "10": {"base": 10.0, "tva": 1.0},
        "20": {"base": 0.0, "tva": 0.0},
    }
    assert collectee["total"] == 4.24
    assert collectee["base_total"] == 68.96

    assert data["deductible"]["par_taux"]["20"] == {"base": 100.0, "tva": 20.0}
    assert data["deductible"]["total"] == 20.0
    assert data["solde"] == {"tva_a_payer": 0.0, "credit_tva": 15.76}
    assert data["details"]["nb_factures"] == 1
    assert data["details"]["nb_ventes"] == 3
    assert data["periode"]["trimestre"] is None


def test_resume_tva_trimestre(client, auth_headers):
    _mouvements_tva(client, auth_headers)
    data = client.get(
        f"/api/v1/comptabilite/tva?annee={ANNEE}&trimestre=1", headers=auth_headers
    ).json()
    assert data["periode"]["debut"] == f"{ANNEE}-01-01"
    assert data["periode"]["fin"] == f"{ANNEE}-03-31"
    assert data["collectee"]["total"] == 2.2
    assert data["details"]["nb_ventes"] == 0
    assert data["solde"]["credit_tva"] == 17.8


def test_resume_tva_avoir_en_negatif(client, auth_headers):
    _facture(client, auth_headers, statut="emise")
    _facture(
        client,
        auth_headers,
        type="avoir",
        statut="emise",
        lignes=[{"description": "Retour", "quantite": 1, "prix_unitaire": 10}],
    )
    data = client.get(f"/api/v1/comptabilite/tva?annee={ANNEE}", headers=auth_headers).json()
    assert data["collectee"]["par_taux"]["5.5"] == {"base": 30.0, "tva": 1.65}
    assert data["solde"]["tva_a_payer"] == 1.65


def test_resume_tva_trimestre_invalide(client, auth_headers):
    resp = client.get("/api/v1/comptabilite/tva?trimestre=5", headers=auth_headers)
    assert resp.status_code == 400
