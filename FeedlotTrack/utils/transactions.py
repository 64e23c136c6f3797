# utils/transactions.py
from contextlib import contextmanager
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from utils.db import SessionLocal

T = TypeVar("T")


@contextmanager
def uow(session: Session | None = None):
    """
    Uso:
        with uow(db) as db:
            ... # operações
        # commit/rollback automático
    Se já tem uma sessão de get_db(), passe-a para não abrir outra.
    """
    owns_session = session is None
    db = session or SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


def insert_or_fetch(
    db: Session,
    fetch: Callable[[], T | None],
    build: Callable[[], T],
) -> tuple[T, bool]:
    """
    Upsert por chave única: busca o registro e, se não existir, insere dentro
    de um SAVEPOINT. Se outro escritor inseriu a mesma chave em paralelo,
    o IntegrityError desfaz só o SAVEPOINT e o registro vencedor é relido.

    Retorna (registro, criado).
    """
    existing = fetch()
    if existing is not None:
        return existing, False

    obj = build()
    try:
        with db.begin_nested():
            db.add(obj)
            db.flush()
    except IntegrityError:
        winner = fetch()
        if winner is None:
            raise
        return winner, False
    return obj, True
