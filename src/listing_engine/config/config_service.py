# ⚙️ listing_engine/config/config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації рушія.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з config.yaml, config.json та .env.
- Надає єдиний метод .get() для доступу до будь-якого параметра.
- Працює як Singleton (з `reset()` для тестів).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv               # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import json                                  # 📄 Робота з JSON-файлами
import logging                               # 🧾 Логування
import os                                    # 📁 Доступ до змінних середовища
from pathlib import Path                     # 📁 Побудова шляху до файлів
from typing import Any, Dict, Optional       # 🧩 Типізація

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent

# 🔐 Змінні середовища, що перекривають файлові значення
ENV_OVERRIDES: Dict[str, str] = {
    "LISTING_ENGINE_LOG_LEVEL": "logging.level",
    "LISTING_ENGINE_PAGE_SIZE": "listing.page_size",
    "LISTING_ENGINE_ITEM_CACHE_TTL": "cache.item_ttl_seconds",
    "LISTING_ENGINE_DOCUMENT_CACHE_TTL": "cache.document_ttl_seconds",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних конфігураційних параметрів рушія.
    Працює як Singleton: конфігурація зчитується лише один раз.
    """

    _instance: Optional["ConfigService"] = None
    _config: Dict[str, Any]

    def __new__(cls) -> "ConfigService":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """🧹 Забуває завантажену конфігурацію (наступний виклик перечитає файли)."""
        cls._instance = None

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Пріоритет (від найнижчого): config.yaml → config.json → .env
        """

        # --- 1. YAML-файл з дефолтами ---
        yaml_path = CONFIG_DIR / "config.yaml"
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                self._deep_update(self._config, yaml.safe_load(f) or {})
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити config.yaml: %s", e)

        # --- 2. JSON-файл (необовʼязкові локальні перевизначення) ---
        json_path = CONFIG_DIR / "config.json"
        if json_path.exists():
            try:
                with open(json_path, "r", encoding="utf-8") as f:
                    self._deep_update(self._config, json.load(f))
            except json.JSONDecodeError as e:
                logger.warning("⚠️ Не вдалося завантажити config.json: %s", e)

        # --- 3. .env змінні ---
        load_dotenv()
        env_vars = {
            dotted: os.getenv(env_name)
            for env_name, dotted in ENV_OVERRIDES.items()
            if os.getenv(env_name) not in (None, "")
        }
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено.")

    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'store.item_table').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================

    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'listing.page_size' → {'listing': {'page_size': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує два словники."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value


__all__ = ["ConfigService", "ENV_OVERRIDES"]
