# 📊 listing_engine/shared/metrics/__init__.py
"""
📊 Prometheus-метрики рушія лістингів.

🔹 `CACHE_LOOKUPS` — результати звернень до ефемерних кешів (hit / miss / expired).
🔹 `STORE_QUERY_FAILURES` — запити до сховища, що деградували до порожнього результату.
🔹 `DIRECTIVES_PARSED` / `LISTING_RENDER_SECONDS` — обсяг та тривалість композиції контенту.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter, Histogram                    # 📊 Prometheus-метрики

# ================================
# ♻️ КЕШІ
# ================================
CACHE_LOOKUPS = Counter(
    "listing_engine_cache_lookups_total",
    "Ephemeral cache lookups by outcome",
    ["cache", "outcome"],
)

# ================================
# 🗄️ СХОВИЩЕ
# ================================
STORE_QUERY_FAILURES = Counter(
    "listing_engine_store_query_failures_total",
    "Store queries that degraded to an empty result",
    ["operation"],
)

# ================================
# 🧩 КОНТЕНТ
# ================================
DIRECTIVES_PARSED = Counter(
    "listing_engine_directives_parsed_total",
    "Listing directives extracted from article content",
    ["kind"],
)

LISTING_RENDER_SECONDS = Histogram(
    "listing_engine_render_seconds",
    "Time to compose all listings of one document",
)

# 🚀 Експортер Prometheus
from .exporters import maybe_start_prometheus  # noqa: E402


__all__ = [
    "CACHE_LOOKUPS",
    "DIRECTIVES_PARSED",
    "LISTING_RENDER_SECONDS",
    "STORE_QUERY_FAILURES",
    "maybe_start_prometheus",
]
