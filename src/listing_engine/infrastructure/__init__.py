# 🏗️ listing_engine/infrastructure/__init__.py
"""
🏗️ Інфраструктурний шар: робота зі сховищем, колекціями, контентом та sitemap.
"""
