# ⚙️ trackbot/config/__init__.py
"""⚙️ Конфігурація застосунку та збірка залежностей."""
