"""
Tests d'authentification : login, logout et API Key
"""


# ── Login


def test_login_ok(client, admin_user):
    """Login avec identifiants valides → 200, retourne une clé de session"""
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@gleba.local", "password": "admin"},
    )
    assert resp.status_code == 200
    data = resp.json()

    assert data["user"]["email"] == "admin@gleba.local"
    assert data["user"]["role"] == "ADMIN"
    assert len(data["api_key"]) > 20
    assert data["key_prefix"] == data["api_key"][:12]
    assert data["expires_at"] is not None


def test_login_mauvais_password(client, admin_user):
    """Login avec mauvais mot de passe → 401"""
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@gleba.local", "password": "wrong"},
    )
    assert resp.status_code == 401


def test_login_utilisateur_inexistant(client):
    """Login avec email inexistant → 401"""
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "ghost@gleba.local", "password": "nope"},
    )
    assert resp.status_code == 401


def test_login_utilisateur_desactive(client, db, regular_user):
    """Utilisateur désactivé → 403"""
    regular_user.is_active = False
    db.flush()
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "jardinier@gleba.local", "password": "password123"},
    )
    assert resp.status_code == 403


def test_login_puis_utiliser_cle(client, admin_user):
    """La clé obtenue via login permet d'accéder aux endpoints protégés"""
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@gleba.local", "password": "admin"},
    )
    api_key = resp.json()["api_key"]

    resp2 = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {api_key}"})
    assert resp2.status_code == 200
    assert resp2.json()["email"] == "admin@gleba.local"


def test_login_echec_trace(client, db, admin_user):
    """Un échec de connexion est tracé dans l'audit"""
    from sqlalchemy import select

    from app.models.audit import AuditLog

    client.post(
        "/api/v1/auth/login",
        json={"email": "admin@gleba.local", "password": "wrong"},
    )
    logs = db.execute(select(AuditLog).where(AuditLog.action == "AUTH_FAILED")).scalars().all()
    assert len(logs) == 1
    assert logs[0].resource_id == "admin@gleba.local"


# ── Logout


def test_logout_revoque_la_cle(client, admin_user):
    """Après logout la clé de session n'est plus acceptée"""
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@gleba.local", "password": "admin"},
    )
    headers = {"Authorization": f"Bearer {resp.json()['api_key']}"}

    assert client.post("/api/v1/auth/logout", headers=headers).status_code == 204
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


# ── API Key


def test_request_sans_header(client):
    """Requête sans header Authorization → 401"""
    resp = client.get("/api/v1/planches")
    assert resp.status_code == 401


def test_request_avec_cle_invalide(client):
    """Requête avec clé invalide → 401"""
    resp = client.get(
        "/api/v1/planches", headers={"Authorization": "Bearer cle_bidon_invalide"}
    )
    assert resp.status_code == 401


def test_request_avec_cle_valide(client, auth_headers):
    """Requête avec clé valide → 200"""
    resp = client.get("/api/v1/planches", headers=auth_headers)
    assert resp.status_code == 200


def test_non_admin_acces_restreint(client, regular_auth_headers):
    """Un utilisateur non administrateur ne peut pas lister les utilisateurs → 403"""
    resp = client.get("/api/v1/admin/users", headers=regular_auth_headers)
    assert resp.status_code == 403


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_login_echec_trace_avec_la_vraie_session(monkeypatch):
    """La trace AUTH_FAILED survit au rollback que get_db fait sur l'erreur 401"""
    from fastapi.testclient import TestClient
    from sqlalchemy import create_engine, select
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from app import database
    from app.main import app
    from app.models import Base
    from app.models.audit import AuditLog
    from app.models.user import ROLE_ADMIN, User
    from app.utils import hash_password

    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with session_factory() as session:
        session.add(
            User(
                email="admin@gleba.local",
                name="Admin",
                password_hash=hash_password("admin"),
                role=ROLE_ADMIN,
                is_active=True,
            )
        )
        session.commit()
    monkeypatch.setattr(database, "SessionLocal", session_factory)

    with TestClient(app) as c:
        resp = c.post(
            "/api/v1/auth/login",
            json={"email": "admin@gleba.local", "password": "wrong"},
        )
    assert resp.status_code == 401

    with session_factory() as session:
        logs = session.execute(
            select(AuditLog).where(AuditLog.action == "AUTH_FAILED")
        ).scalars().all()
    assert [log.resource_id for log in logs] == ["admin@gleba.local"]
    engine.dispose()
