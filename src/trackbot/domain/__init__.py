# 🏛️ trackbot/domain/__init__.py
"""🏛️ Доменний шар: DTO, ключі та контракти без інфраструктури."""
