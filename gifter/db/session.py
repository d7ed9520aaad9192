from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gifter.core.config import settings


def create_db_engine(database_url: str) -> Engine:
    """
    Build the engine for DATABASE_URL.

    SQLite gets foreign keys enabled per connection. File-backed SQLite also
    opens every transaction with BEGIN IMMEDIATE, so a read-then-write unit
    (append's max(order), reorder's id-set check) holds the write lock from its
    first statement. SELECT ... FOR UPDATE is a no-op there.
    """
    url = make_url(database_url)
    backend = url.get_backend_name()

    connect_args = {}
    engine_kwargs = {}
    in_memory = False
    if backend.startswith("postgresql"):
        connect_args["options"] = "-c timezone=utc"
    elif backend == "sqlite":
        # Request handlers run in a threadpool
        connect_args["check_same_thread"] = False
        in_memory = url.database in (None, "", ":memory:")
        if in_memory:
            # One shared connection, otherwise every checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(
        database_url, pool_pre_ping=True, connect_args=connect_args, **engine_kwargs
    )

    if backend != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _configure_sqlite_connection(dbapi_connection, connection_record):
        """SQLite ignores REFERENCES ... ON DELETE CASCADE unless enabled per connection."""
        if not in_memory:
            # Stop pysqlite from issuing its own deferred BEGIN
            dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    if not in_memory:

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autoflush=False, bind=engine)
