# 📖 trackbot/config/setup/constants.py
"""
📖 Типобезпечні константи Telegram-бота.

🔹 Назви команд і режим розмітки в одному місці.
🔹 Імутабельність через `dataclass(slots=True, frozen=True)`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field                               # 🧱 Опис імутабельних структур
from typing import Final                                               # 🧮 Типізація


@dataclass(frozen=True, slots=True)
class _Commands:
    START: Final[str] = "start"                                        # ▶️ Привітання
    HELP: Final[str] = "help"                                          # ❓ Синтаксис запиту


@dataclass(frozen=True, slots=True)
class AppConstants:
    COMMANDS: _Commands = field(default_factory=_Commands)
    PARSE_MODE: str = "HTML"


CONST = AppConstants()

__all__ = ["AppConstants", "CONST"]
