# 🚨 listing_engine/shared/errors.py
"""
🚨 Ієрархія винятків рушія колекцій та лістингів.

🔹 Кожен виняток знає, як скласти `extra` для структурованих логів (`to_log_extra`).
🔹 Жоден із них не перетинає межу рушія: вони описують деградацію до порожнього результату.
🔹 Жорсткі збої колабораторів (наприклад, lookup колекції) прокидаються без обгортки.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Dict, Optional                                   # 📐 Типізація


# ================================
# ⚠️ КОДИ ПОМИЛОК
# ================================
class ErrorCode:
    """⚠️ Категорії помилок для поля `error_code` у логах."""

    SCHEMA_PROBE = "schema_probe_failure"
    PARSE_AMBIGUITY = "parse_ambiguity"
    STORE_QUERY = "store_query_failure"
    VALIDATION = "validation_failure"
    CONFIGURATION = "configuration_error"
    UNKNOWN = "unknown_error"


# ================================
# 🧠 БАЗОВИЙ ВИНЯТОК
# ================================
class ListingEngineError(Exception):
    """🧠 Базовий виняток рушія."""

    code: str = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для logger.extra."""
        extra: Dict[str, object] = {"error_code": self.code}
        if self.details:
            extra["details"] = self.details
        return extra

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# ================================
# 🧾 СПЕЦІАЛІЗОВАНІ ВИНЯТКИ
# ================================
class SchemaProbeFailure(ListingEngineError):
    """🔬 Пробу колонки не вдалося виконати; колонку пропускаємо."""

    code = ErrorCode.SCHEMA_PROBE

    def __init__(self, column: str, *, table: Optional[str] = None, details: Optional[str] = None) -> None:
        super().__init__(f"Column probe failed for {table or '?'}.{column}", details=details)
        self.column = column
        self.table = table

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["column"] = self.column
        if self.table:
            extra["table"] = self.table
        return extra


class ParseAmbiguity(ListingEngineError):
    """🌫️ Дескриптор директиви не дав однозначного slug."""

    code = ErrorCode.PARSE_AMBIGUITY

    def __init__(self, descriptor: str, *, details: Optional[str] = None) -> None:
        super().__init__("Listing directive descriptor is ambiguous", details=details)
        self.descriptor = descriptor

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["descriptor"] = self.descriptor
        return extra


class StoreQueryFailure(ListingEngineError):
    """🗄️ Запит до сховища завершився помилкою."""

    code = ErrorCode.STORE_QUERY

    def __init__(
        self,
        operation: str,
        *,
        slug: Optional[str] = None,
        request_id: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(f"Store query failed during {operation}", details=details)
        self.operation = operation
        self.slug = slug
        self.request_id = request_id

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["operation"] = self.operation
        if self.slug:
            extra["slug"] = self.slug
        if self.request_id:
            extra["request_id"] = self.request_id
        return extra


class ValidationFailure(ListingEngineError):
    """🚫 Дескриптор директиви непридатний; фрагмент лишаємо як є."""

    code = ErrorCode.VALIDATION

    def __init__(self, reason: str, *, fragment: Optional[str] = None) -> None:
        super().__init__(f"Directive rejected: {reason}")
        self.reason = reason
        self.fragment = fragment

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["reason"] = self.reason
        if self.fragment is not None:
            extra["fragment"] = self.fragment[:120]
        return extra


class ConfigurationError(ListingEngineError):
    """⚙️ Некоректне значення конфігурації."""

    code = ErrorCode.CONFIGURATION


__all__ = [
    "ErrorCode",
    "ListingEngineError",
    "SchemaProbeFailure",
    "ParseAmbiguity",
    "StoreQueryFailure",
    "ValidationFailure",
    "ConfigurationError",
]
