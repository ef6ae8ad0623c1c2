import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from paygate.core.config import Settings, settings as default_settings
from paygate.core.database import Base, build_engine, build_session_factory

logger = logging.getLogger(__name__)


class GatewayContext:
    """
    CONTEXTE DU PROCESSUS : construit une seule fois au démarrage.
    Regroupe la config, le moteur SQL et les usines à sessions (lecture et
    écriture). Il est passé explicitement au moteur de transfert, jamais lu
    dans une variable globale.
    """

    def __init__(
        self,
        settings: Settings,
        engine: Engine,
        session_factory: sessionmaker,
        write_session_factory: sessionmaker,
    ):
        self.settings = settings
        self.engine = engine
        self.session_factory = session_factory
        self.write_session_factory = write_session_factory

    def create_tables(self) -> None:
        # Création des tables (si elles n'existent pas)
        from paygate import models  # noqa: F401  (enregistre les modèles sur Base)

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def build_context(settings: Optional[Settings] = None) -> GatewayContext:
    settings = settings or default_settings
    engine = build_engine(settings)
    logger.info("Database engine ready (%s)", engine.url.get_backend_name())
    return GatewayContext(
        settings,
        engine,
        build_session_factory(engine),
        build_session_factory(engine, write=True),
    )


# La dépendance que les routeurs utilisent
def get_context(request: Request) -> GatewayContext:
    return request.app.state.context
