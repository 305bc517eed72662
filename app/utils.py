"""
Utilitaires pour le projet Gleba API
"""

import secrets
from datetime import datetime, timezone
from typing import Optional

import bcrypt

from app.config import settings


def hash_password(password: str) -> str:
    """Hash un mot de passe avec bcrypt"""
    salt = bcrypt.gensalt(rounds=settings.GLEBA_BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Vérifie un mot de passe contre son hash bcrypt"""
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def generate_key(length: int = 48) -> tuple[str, str]:
    """Génère une clé API et son hash"""
    raw_key = secrets.token_urlsafe(length)
    return raw_key, hash_password(raw_key)


def round2(value: float) -> float:
    """Arrondi a deux decimales pour les montants et quantites exposes"""
    return round(value * 100) / 100


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Ramene une date avec fuseau en UTC sans fuseau, comme les colonnes DateTime"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
