# 🧰 listing_engine/shared/__init__.py
"""
🧰 Спільний шар: помилки, кеші, метрики та утиліти.
"""
