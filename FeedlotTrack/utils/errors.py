from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from utils.logging_config import get_logger, log_error

logger = get_logger("api")


# =====================================================
# Exceções de domínio do motor de ração
# =====================================================
class DomainError(Exception):
    """Base das falhas do motor. `code` vira o campo `error` da resposta HTTP."""
    code = "domain_error"
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(DomainError):
    """Entrada inválida (somas de percentuais, cobertura de períodos, valores <= 0)."""
    code = "validation_error"
    status_code = 422


class NotFoundError(DomainError):
    code = "not_found"
    status_code = 404


class StateError(DomainError):
    """Transição não permitida (batida em estado terminal, leitura já concluída)."""
    code = "state_error"
    status_code = 409


class StockError(DomainError):
    """
    Estoque insuficiente na aprovação de uma batida.
    `faltas` lista TODOS os insumos deficientes, não apenas o primeiro.
    """
    code = "insufficient_stock"
    status_code = 409

    def __init__(self, faltas: list[dict[str, Any]]):
        self.faltas = faltas
        partes = [
            f"{f['insumo_nome']} (necessário {f['necessario_kg']} kg, "
            f"disponível {f['disponivel_kg']} kg, faltam {f['faltante_kg']} kg)"
            for f in faltas
        ]
        super().__init__("Estoque insuficiente: " + "; ".join(partes))


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _normalize_errors(errs):
    norm = []
    for e in errs:
        e = dict(e)
        val = e.get("input")
        if isinstance(val, (bytes, bytearray)):
            e["input"] = val.decode("utf-8", errors="ignore")
        # ctx pode carregar a exceção original (não serializável)
        if "ctx" in e:
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        norm.append(e)
    return norm


def install_error_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "validation_error", "detail": _normalize_errors(exc.errors())},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_handler(request: Request, exc: IntegrityError):
        log_error(logger, exc, f"{request.method} {request.url.path}")
        return JSONResponse(status_code=409, content={"error": "conflict", "detail": str(exc.orig)})

    @app.exception_handler(DomainError)
    async def domain_handler(request: Request, exc: DomainError):
        content: dict[str, Any] = {"error": exc.code, "detail": exc.detail}
        if isinstance(exc, StockError):
            content["faltas"] = _jsonable(exc.faltas)
        return JSONResponse(status_code=exc.status_code, content=content)
