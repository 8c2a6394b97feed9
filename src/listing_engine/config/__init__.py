# ⚙️ listing_engine/config/__init__.py
"""
⚙️ Конфігурація рушія: `ConfigService` (YAML/JSON/.env) та типізовані `EngineSettings`.
"""

from __future__ import annotations

from .config_service import ConfigService
from .settings import CacheSettings, EngineSettings, ListingSettings, StoreSettings

__all__ = ["CacheSettings", "ConfigService", "EngineSettings", "ListingSettings", "StoreSettings"]
