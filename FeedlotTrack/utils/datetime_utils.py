"""
Utilidades centralizadas para datas e timestamps.
Todas as operações usam o fuso configurado (America/Sao_Paulo por padrão)
como referência.

Convenção do sistema:
- Se um datetime chega **naive** (sem tzinfo), é interpretado como hora local da fazenda.
- Se chega **aware** (com tzinfo), é convertido para a hora local e persistido
  como naive (sem tzinfo).
"""
from datetime import datetime, date, timedelta
from zoneinfo import ZoneInfo

from config.settings import settings

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """
    Retorna o datetime atual no fuso local (naive para colunas DATETIME).
    """
    return datetime.now(LOCAL_TZ).replace(tzinfo=None, microsecond=0)


def today_local() -> date:
    """
    Retorna a data atual (date) no fuso local.
    """
    return datetime.now(LOCAL_TZ).date()


def to_local_naive(dt: datetime) -> datetime:
    """
    Normaliza um datetime para hora local SEM tzinfo (naive) para persistência.
    """
    if dt.tzinfo is None:
        return dt.replace(microsecond=0)
    return dt.astimezone(LOCAL_TZ).replace(tzinfo=None, microsecond=0)


def next_day(d: date) -> date:
    return d + timedelta(days=1)
