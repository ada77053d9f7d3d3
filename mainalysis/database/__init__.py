"""
Módulo de database: conexão com PostgreSQL (Supabase)
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from mainalysis.config import settings

_engine_kwargs = {
    "pool_pre_ping": True,
    "echo": settings.DEBUG,
}

# SQLite (testes) não aceita pool_size/max_overflow
if settings.DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    _engine_kwargs["pool_size"] = 5
    _engine_kwargs["max_overflow"] = 10

# Criar engine do SQLAlchemy usando DATABASE_URL do .env
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

# Criar SessionLocal
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para os models
Base = declarative_base()


# Dependency para obter a sessão do banco
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

__all__ = ['get_db', 'Base', 'SessionLocal', 'engine']
