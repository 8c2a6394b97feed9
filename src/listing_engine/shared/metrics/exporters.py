# 🚀 listing_engine/shared/metrics/exporters.py
"""
🚀 Ліниве підняття HTTP-експортера Prometheus (`/metrics`).

🔹 Ідемпотентний: повторний виклик з тим самим портом нічого не робить.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server                    # 📈 Вбудований HTTP-сервер метрик

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи експортера
from threading import Lock                                          # 🔒 Захист від подвійного старту
from typing import Set                                              # 📐 Типізація

logger = logging.getLogger(__name__)

_started_ports: Set[int] = set()
_lock = Lock()


def maybe_start_prometheus(port: int, addr: str = "0.0.0.0") -> bool:
    """
    Стартує експортер, якщо на цьому порту його ще немає.

    Returns:
        bool: True, якщо сервер запущено саме цим викликом.
    """
    with _lock:
        if port in _started_ports:
            logger.debug("📈 Експортер уже працює на порті %s", port)
            return False
        start_http_server(port, addr=addr)
        _started_ports.add(port)
    logger.info("📈 Prometheus /metrics на %s:%s", addr, port)
    return True


__all__ = ["maybe_start_prometheus"]
