# 🧩 listing_engine/__init__.py
"""
🧩 listing_engine — визначення членства товарів у колекціях та вбудовані лістинги у статтях.

🔹 `domain` — чисті сутності, варіанти назв і побудова SQL-предикатів.
🔹 `infrastructure` — інтроспекція схеми, резолвер товарів колекції, парсер директив, композер.
🔹 `shared` — логування, помилки, кеші з TTL, метрики.
"""

__version__ = "0.1.0"
