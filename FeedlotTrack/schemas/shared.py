# schemas/shared.py
from __future__ import annotations

from pydantic import BaseModel, constr


# -------------------------------------------------------------------
# Base comum para todos os schemas (Pydantic v2)
# -------------------------------------------------------------------
class ORMModel(BaseModel):
    """
    Modelo base dos schemas de saída.
    - from_attributes=True: constrói o schema a partir de objetos ORM e dataclasses.
    - str_strip_whitespace=True: limpa espaços em strings.
    """
    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "str_strip_whitespace": True,
    }


# Horário de trato no formato HH:MM (00:00 a 23:59)
HorarioStr = constr(strip_whitespace=True, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class Msg(BaseModel):
    """Resposta simples com mensagem (deletes, ações)."""
    detail: str


__all__ = ["ORMModel", "HorarioStr", "Msg"]
