# config/settings.py
"""
Configuração centralizada da aplicação usando Pydantic Settings.
As variáveis são carregadas do arquivo .env
"""

from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuração da aplicação"""

    # Banco de dados
    DATABASE_URL: str

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = ["http://localhost:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str | None = None  # Se definido, grava também em arquivo rotativo

    # Fuso horário de referência das leituras e planejamentos
    TIMEZONE: str = "America/Sao_Paulo"

    # Leitura de cocho (limites de ajuste por leitura)
    BUNK_ADJUSTMENT_MIN_PCT: Decimal = Decimal("-15")
    BUNK_ADJUSTMENT_MAX_PCT: Decimal = Decimal("15")
    BUNK_EARLY_DAYS_THRESHOLD: int = 7  # Dias de cocho considerados recepção
    BUNK_EARLY_DAYS_DAMPING: Decimal = Decimal("0.5")  # Fator aplicado ao ajuste na recepção

    # Validação de leituras consecutivas
    READING_SCORE_JUMP_THRESHOLD: Decimal = Decimal("1.5")
    READING_EXTREME_REPEAT_DAYS: int = 2

    # Projeção de consumo
    CONSUMPTION_LARGE_DROP_PCT: Decimal = Decimal("50")

    # Planejamento de tratos
    SCHEDULE_PERCENT_TOLERANCE: Decimal = Decimal("0.01")

    class Config:
        env_file = ".env"
        case_sensitive = True

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Limites invertidos tornariam o clamp inconsistente
        if self.BUNK_ADJUSTMENT_MIN_PCT > self.BUNK_ADJUSTMENT_MAX_PCT:
            raise ValueError("BUNK_ADJUSTMENT_MIN_PCT não pode ser maior que BUNK_ADJUSTMENT_MAX_PCT")


settings = Settings()
