"""
Fixtures de test pour l'API gleba
Base SQLite en mémoire, schéma créé depuis les modèles, rollback par test
"""

import os

# avant tout import de l'application : base de test et hachage rapide
os.environ.setdefault("GLEBA_DATABASE_URL", "sqlite://")
os.environ.setdefault("GLEBA_BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models import Base, Espece, Famille, Itp
from app.models.user import ROLE_ADMIN, ROLE_USER, ApiKey, User
from app.utils import generate_key, hash_password


# une seule connexion partagee entre le client de test et les fixtures
_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
Base.metadata.create_all(bind=_engine)
_TestSession = sessionmaker(autocommit=False, autoflush=False, bind=_engine)


@pytest.fixture()
def db() -> Session:
    """Session DB avec rollback automatique après chaque test"""
    connection = _engine.connect()
    transaction = connection.begin()
    session = _TestSession(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture()
def client(db: Session) -> TestClient:
    """Client HTTP de test avec override de la session DB"""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _api_key(db: Session, user: User, name: str) -> str:
    raw_key, key_hash = generate_key()
    db.add(ApiKey(user_id=user.id, key_hash=key_hash, key_prefix=raw_key[:12], name=name))
    db.flush()
    return raw_key


@pytest.fixture()
def admin_user(db: Session) -> User:
    """Administrateur (équivalent de celui créé par la migration)"""
    user = User(
        email="admin@gleba.local",
        name="Admin",
        password_hash=hash_password("admin"),
        role=ROLE_ADMIN,
        is_active=True,
    )
    db.add(user)
    db.flush()
    return user


@pytest.fixture()
def auth_headers(db: Session, admin_user: User) -> dict[str, str]:
    """Headers d'authentification prets a l'emploi"""
    return {"Authorization": f"Bearer {_api_key(db, admin_user, 'test-key')}"}


@pytest.fixture()
def regular_user(db: Session) -> User:
    """Utilisateur non administrateur"""
    user = User(
        email="jardinier@gleba.local",
        name="Jardinier",
        password_hash=hash_password("password123"),
        role=ROLE_USER,
        is_active=True,
    )
    db.add(user)
    db.flush()
    return user


@pytest.fixture()
def regular_auth_headers(db: Session, regular_user: User) -> dict[str, str]:
    """Headers d'authentification pour l'utilisateur non administrateur"""
    return {"Authorization": f"Bearer {_api_key(db, regular_user, 'regular-test-key')}"}


@pytest.fixture()
def referentiel(db: Session) -> dict:
    """Familles, espèces et ITP de base pour les tests du potager"""
    solanacees = Famille(id="Solanacées", intervalle=4, couleur="#ef4444")
    fabacees = Famille(id="Fabacées", intervalle=3, couleur="#84cc16")
    db.add_all([solanacees, fabacees])
    db.flush()

    tomate = Espece(
        id="Tomate",
        famille_id="Solanacées",
        rendement=4,
        besoin_n=5,
        besoin_eau=4,
        couleur="#dc2626",
        inventaire=2,
    )
    haricot = Espece(id="Haricot", famille_id="Fabacées", rendement=1.5, besoin_n=1, besoin_eau=2)
    db.add_all([tomate, haricot])
    db.flush()

    itp_tomate = Itp(
        id="Tomate plein champ",
        espece_id="Tomate",
        semaine_semis=10,
        semaine_plantation=18,
        semaine_recolte=28,
        duree_culture=120,
        nb_rangs=2,
        espacement=50,
        espacement_rangs=60,
    )
    db.add(itp_tomate)
    db.flush()
    return {"tomate": tomate, "haricot": haricot, "itp_tomate": itp_tomate}
