from sqlalchemy import BigInteger, Integer, create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from config.settings import settings


def _connect_args(url: str) -> dict:
    # SQLite (dev/testes) compartilha a conexão entre threads do servidor
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
    pool_recycle=3600,
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Chave primária BIGINT; no SQLite precisa ser INTEGER para virar alias do ROWID
BigIntId = BigInteger().with_variant(Integer, "sqlite")
