import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Настройка корневого логгера приложения"""
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Повторный вызов (например, при перезапуске lifespan в тестах) не дублирует обработчик
    if any(getattr(handler, "_docservice", False) for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._docservice = True
    root.addHandler(handler)
