"""
Tests for the unique-key upsert used by readings and feeding plans
"""
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from models.leitura_cocho import LeituraCocho
from utils.transactions import insert_or_fetch, uow

DIA = date(2026, 1, 20)


def _nova(lote_id):
    return LeituraCocho(lote_id=lote_id, data_referencia=DIA, alertas=[])


def _buscar(db, lote_id):
    return (
        db.query(LeituraCocho)
        .filter(LeituraCocho.lote_id == lote_id, LeituraCocho.data_referencia == DIA)
        .one_or_none()
    )


class TestInsertOrFetch:
    def test_inserts_when_missing(self, db, feedlot):
        with uow(db):
            leitura, criado = insert_or_fetch(db, lambda: _buscar(db, feedlot.lote_id), lambda: _nova(feedlot.lote_id))
        assert criado
        assert db.query(LeituraCocho).count() == 1

    def test_returns_existing_row(self, db, feedlot):
        db.add(_nova(feedlot.lote_id))
        db.commit()
        with uow(db):
            leitura, criado = insert_or_fetch(db, lambda: _buscar(db, feedlot.lote_id), lambda: _nova(feedlot.lote_id))
        assert not criado
        assert db.query(LeituraCocho).count() == 1

    def test_losing_insert_rereads_the_committed_row(self, db, feedlot):
        """Outro escritor gravou a mesma (lote, data) entre a busca e o INSERT."""
        vencedora = _nova(feedlot.lote_id)
        db.add(vencedora)
        db.commit()
        vencedora_id = vencedora.leitura_cocho_id

        chamadas = []

        def fetch():
            chamadas.append(1)
            # a primeira busca ainda não enxerga a linha do outro escritor
            return None if len(chamadas) == 1 else _buscar(db, feedlot.lote_id)

        with uow(db):
            leitura, criado = insert_or_fetch(db, fetch, lambda: _nova(feedlot.lote_id))

        assert not criado
        assert len(chamadas) == 2
        assert leitura.leitura_cocho_id == vencedora_id
        assert db.query(LeituraCocho).count() == 1

    def test_integrity_error_without_winner_propagates(self, db, feedlot):
        db.add(_nova(feedlot.lote_id))
        db.commit()
        with pytest.raises(IntegrityError):
            with uow(db):
                insert_or_fetch(db, lambda: None, lambda: _nova(feedlot.lote_id))
        assert db.query(LeituraCocho).count() == 1
