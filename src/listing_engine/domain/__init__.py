# 🧩 listing_engine/domain/__init__.py
"""
🧩 Доменний шар: чисті сутності та функції без вводу-виводу.
"""
