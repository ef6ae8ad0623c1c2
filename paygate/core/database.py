from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from paygate.core.config import Settings

# La classe de base pour les modèles (Account, GatewayToken, Transaction)
Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    url = settings.database_url

    # SQLite : on partage la connexion entre threads (pool de FastAPI)
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT}

    engine = create_engine(url, connect_args=connect_args, echo=settings.DB_ECHO)

    if url.startswith("sqlite"):
        _serialize_sqlite_writers(engine)
    return engine


def _serialize_sqlite_writers(engine: Engine) -> None:
    """
    SQLite n'a pas de SELECT ... FOR UPDATE. Les unités d'écriture (marquées
    sqlite_begin_immediate) prennent le verrou d'écriture dès le BEGIN pour que
    deux transferts ne lisent jamais le même solde périmé. Les lectures gardent
    un BEGIN différé et ne font pas la queue derrière les écritures.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        # pysqlite émet son propre BEGIN différé, on le coupe
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get("sqlite_begin_immediate"):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def build_session_factory(engine: Engine, write: bool = False) -> sessionmaker:
    # Sessions d'écriture : débit/crédit et journal. Option ignorée hors SQLite.
    if write:
        engine = engine.execution_options(sqlite_begin_immediate=True)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
