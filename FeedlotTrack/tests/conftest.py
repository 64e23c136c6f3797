"""
Fixtures compartilhadas: banco SQLite em memória criado a cada teste a partir
dos modelos ORM, sessão e TestClient com get_db sobrescrito.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from enums.enums import FaseDietaEnum, TipoIngredienteEnum
from main import app
from models import (
    Base,
    Dieta,
    IngredienteDieta,
    IngredientePreMistura,
    Insumo,
    Lote,
    PeriodoAlimentacao,
    PreMistura,
    Vagao,
)
from utils.db import get_db


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite não emite BEGIN sozinho; sem isso SAVEPOINT não funciona
    @event.listens_for(eng, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def feedlot(db):
    """
    Cenário base:
    - lote de 100 animais, 350 kg na entrada (01/01/2026), GMD 1.5, 90 dias, 8 kg/cab atuais
    - períodos 1-20 (adaptação, 2.0% PV), 21-60 (terminação, 2.2%), 61-90 (terminação, 2.4%)
    - dieta de adaptação: 100% milho; terminação: 80% milho + 20% pré-mistura (50% núcleo, 50% ureia)
    - ambas com 50% de MS
    """
    milho = Insumo(nome="Milho moído")
    nucleo = Insumo(nome="Núcleo mineral")
    ureia = Insumo(nome="Ureia")
    db.add_all([milho, nucleo, ureia])
    db.flush()

    premix = PreMistura(
        nome="Mineral + ureia",
        ingredientes=[
            IngredientePreMistura(insumo_id=nucleo.insumo_id, percentual_mistura=Decimal("50"), ordem=1),
            IngredientePreMistura(insumo_id=ureia.insumo_id, percentual_mistura=Decimal("50"), ordem=2),
        ],
    )
    adaptacao = Dieta(
        nome="Adaptação",
        ms_media=Decimal("50"),
        custo_kg=Decimal("0.80"),
        fase_dieta=FaseDietaEnum.adaptacao_crescimento,
        ingredientes=[
            IngredienteDieta(
                tipo=TipoIngredienteEnum.insumo,
                insumo_id=milho.insumo_id,
                percentual_mistura=Decimal("100"),
                ordem=1,
            ),
        ],
    )
    terminacao = Dieta(
        nome="Terminação",
        ms_media=Decimal("50"),
        custo_kg=Decimal("1.00"),
        fase_dieta=FaseDietaEnum.terminacao,
        ingredientes=[
            IngredienteDieta(
                tipo=TipoIngredienteEnum.insumo,
                insumo_id=milho.insumo_id,
                percentual_mistura=Decimal("80"),
                ordem=1,
            ),
            IngredienteDieta(
                tipo=TipoIngredienteEnum.pre_mistura,
                pre_mistura=premix,
                percentual_mistura=Decimal("20"),
                ordem=2,
            ),
        ],
    )
    vagao = Vagao(nome="Vagão 1", capacidade_kg=Decimal("5000"))
    db.add_all([premix, adaptacao, terminacao, vagao])
    db.flush()

    lote = Lote(
        nome="Lote 01",
        quantidade_animais=100,
        data_entrada=date(2026, 1, 1),
        peso_medio_entrada=Decimal("350"),
        gmd_projetado=Decimal("1.5"),
        dias_planejados=90,
        kg_por_cabeca_atual=Decimal("8.000"),
        periodos=[
            PeriodoAlimentacao(dieta_id=adaptacao.dieta_id, dia_inicial=1, dia_final=20,
                               ingestao_ms_pct_pv=Decimal("2.0")),
            PeriodoAlimentacao(dieta_id=terminacao.dieta_id, dia_inicial=21, dia_final=60,
                               ingestao_ms_pct_pv=Decimal("2.2")),
            PeriodoAlimentacao(dieta_id=terminacao.dieta_id, dia_inicial=61, dia_final=90,
                               ingestao_ms_pct_pv=Decimal("2.4")),
        ],
    )
    db.add(lote)
    db.commit()

    return SimpleNamespace(
        lote_id=lote.lote_id,
        milho_id=milho.insumo_id,
        nucleo_id=nucleo.insumo_id,
        ureia_id=ureia.insumo_id,
        premix_id=premix.pre_mistura_id,
        adaptacao_id=adaptacao.dieta_id,
        terminacao_id=terminacao.dieta_id,
        vagao_id=vagao.vagao_id,
    )
