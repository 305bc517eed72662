"""
Gestion de la connexion base de données pour l'API
Fournit le moteur SQLAlchemy et la dépendance get_db pour FastAPI
"""

from typing import Generator
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import settings

# moteur de sqlachemy pour l'acces a la BD
engine: Engine = create_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
)

# fabrique de sessions liee au moteur
SessionLocal: sessionmaker[Session] = sessionmaker(
    autocommit=False, autoflush=False, bind=engine
)


def get_db() -> Generator[Session, None, None]:
    """Dépendance FastAPI : une session par requete, commit a la fin ou rollback"""
    db = SessionLocal()
    try:
        yield db
        # la requete s'est bien passee, on valide tout d'un bloc
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
