"""
Configuration de l'application via variables d'environnement
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration centralisée de l'API gleba"""

    # Base de données
    GLEBA_DB_HOST: str = "localhost"
    GLEBA_DB_PORT: int = 5432
    GLEBA_DB_NAME: str = "gleba"
    GLEBA_DB_USER: str = "gleba"
    GLEBA_DB_PASSWORD: str = "gleba"

    # URL complete, prioritaire sur les champs ci-dessus (ex: sqlite:// en test)
    GLEBA_DATABASE_URL: Optional[str] = None

    # Administrateur par défaut (cree par la migration initiale)
    GLEBA_ADMIN_EMAIL: str = "admin@gleba.local"
    GLEBA_ADMIN_PASSWORD: str = "admin"

    # Authentification
    GLEBA_SESSION_TTL_HOURS: int = 24 * 30
    GLEBA_BCRYPT_ROUNDS: int = 12

    # Journalisation
    GLEBA_LOG_LEVEL: str = "INFO"

    # API
    GLEBA_API_TITLE: str = "Gleba API"
    GLEBA_API_VERSION: str = "1.0.0"

    @property
    def database_url(self) -> str:
        if self.GLEBA_DATABASE_URL:
            return self.GLEBA_DATABASE_URL
        return (
            f"postgresql://{self.GLEBA_DB_USER}:{self.GLEBA_DB_PASSWORD}"
            f"@{self.GLEBA_DB_HOST}:{self.GLEBA_DB_PORT}/{self.GLEBA_DB_NAME}"
        )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
