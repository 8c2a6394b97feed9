# 📦 listing_engine/config/setup/__init__.py
"""
📦 Збирання залежностей рушія (`Container`).
"""
