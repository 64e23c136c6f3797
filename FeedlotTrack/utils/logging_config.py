import logging
import logging.handlers
from pathlib import Path

from config.settings import settings

_FORMAT_DETAILED = "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(funcName)s | %(message)s"
_FORMAT_SIMPLE = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_ROOT_NAME = "feedlot"
_configured = False


def setup_logging(level: str | None = None, log_dir: str | None = None) -> logging.Logger:
    """
    Configura o logger raiz da aplicação uma única vez:
    - console sempre
    - arquivo rotativo (app.log) + arquivo de erros (error.log) se LOG_DIR estiver definido
    """
    global _configured
    root = logging.getLogger(_ROOT_NAME)
    if _configured:
        return root

    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(_FORMAT_SIMPLE))
    root.addHandler(console_handler)

    target_dir = log_dir or settings.LOG_DIR
    if target_dir:
        logs_path = Path(target_dir)
        logs_path.mkdir(parents=True, exist_ok=True)

        app_handler = logging.handlers.RotatingFileHandler(
            logs_path / "app.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        app_handler.setFormatter(logging.Formatter(_FORMAT_DETAILED))
        root.addHandler(app_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            logs_path / "error.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=5,
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(_FORMAT_DETAILED))
        root.addHandler(error_handler)

    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger filho de `feedlot` (ex.: get_logger("batch") -> feedlot.batch)."""
    setup_logging()
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


def log_error(logger: logging.Logger, error: Exception, context: str | None = None) -> None:
    """Registra erros com contexto"""
    context_str = f" | Contexto: {context}" if context else ""
    logger.error(f"Erro: {error}{context_str}", exc_info=True)
