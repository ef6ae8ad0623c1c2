from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # NOM DU PROJET
    PROJECT_NAME: str = "PAYGATE API"
    VERSION: str = "1.0.0"

    # BASE DE DONNÉES
    # En prod on reçoit l'URL PostgreSQL par l'environnement, sinon SQLite local.
    DATABASE_URL: str = "sqlite:///./paygate.db"
    DB_ECHO: bool = False
    # Secondes d'attente du verrou d'écriture SQLite avant "database is locked"
    SQLITE_BUSY_TIMEOUT: float = 30.0

    # CORS : la passerelle est publique, tout le monde peut l'appeler
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def database_url(self) -> str:
        # Le petit correctif pour PostgreSQL (Render / Heroku donnent "postgres://")
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
        return self.DATABASE_URL


settings = Settings()
