"""Schema initial gleba

Revision ID: 001_schema_initial
Revises:

Tables: utilisateurs, cles API, audit, referentiels, potager, verger,
elevage et comptabilite
Données par défaut: utilisateur admin (via env vars)
"""

import logging

from alembic import op
from sqlalchemy.orm import Session

from app.config import settings
from app.models import Base
from app.services.user import ensure_admin

revision = "001_schema_initial"
down_revision = None
branch_labels = None
depends_on = None

logger = logging.getLogger("alembic.runtime.migration")


def upgrade() -> None:
    bind = op.get_bind()

    # ── Tables (schema decrit par les modeles)
    Base.metadata.create_all(bind=bind)

    # ── Utilisateur admin par defaut
    session = Session(bind=bind)
    try:
        _, created = ensure_admin(
            session,
            email=settings.GLEBA_ADMIN_EMAIL,
            password=settings.GLEBA_ADMIN_PASSWORD,
        )
        session.flush()
    finally:
        session.close()
    if created:
        logger.info("Administrateur %s créé", settings.GLEBA_ADMIN_EMAIL)


def downgrade() -> None:
    Base.metadata.drop_all(bind=op.get_bind())
