# rumbo/config/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from .settings import settings

# Configuración del engine
engine_kwargs = {
    "echo": settings.debug
}

if settings.is_sqlite:
    # SQLite (tests / desarrollo local): una sola conexión compartida
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    engine_kwargs["poolclass"] = StaticPool
else:
    engine_kwargs["pool_pre_ping"] = True
    engine_kwargs["pool_recycle"] = 300
    # SSL para Postgres en Render
    if "render" in settings.database_url:
        engine_kwargs["connect_args"] = {
            "sslmode": "require"
        }

# Create engine
engine = create_engine(
    settings.database_url_with_ssl,
    **engine_kwargs
)

if settings.is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables():
    """Crear todas las tablas del modelo (idempotente)"""
    from rumbo.shared.database.models import Base
    Base.metadata.create_all(bind=engine)

def drop_tables():
    from rumbo.shared.database.models import Base
    Base.metadata.drop_all(bind=engine)
