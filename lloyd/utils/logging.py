import logging
from typing import Any, Dict


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает корневой логгер проекта ``lloyd``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("lloyd")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_points_prefix(N: int, D: int, K: int) -> str:
    """Текстовый префикс для логов по размерам задачи."""
    return f"[N={N} D={D} K={K}]"


def format_dataset_prefix(meta: Dict[str, Any]) -> str:
    """
    Формирует префикс по метаданным датасета.

    Ожидается словарь с ключами ``N``, ``D`` и опциональными ``K`` и ``source``.
    """
    prefix = f"[N={meta['N']} D={meta['D']}"
    if meta.get("K") is not None:
        prefix += f" K={meta['K']}"
    if meta.get("source"):
        prefix += f" source={meta['source']}"
    return prefix + "]"
