# 💬 trackbot/bot/ui/static_messages.py
"""
💬 Статичні тексти інтерфейсу бота.

🔹 Короткі фіксовані рядки: технічні деталі користувачу не показуються.
🔹 Етапи завантаження відображаються у статусі inline-повідомлення.
"""

# ================================
# 👋 КОМАНДИ
# ================================
START_GREETING = (
    "👋 Привіт! Я працюю в inline-режимі.\n\n"
    "Наберіть у будь-якому чаті:\n"
    "<code>@{bot} music [yandex|hifi|qobuz] запит</code>\n"
    "<code>@{bot} lucida [tidal|qobuz|deezer|soundcloud|amazon] запит</code>"
)

# ================================
# 🔎 INLINE-ПОШУК
# ================================
ENTER_COMMAND = "Введіть команду"
ENTER_QUERY = "Введіть запит"
UNKNOWN_COMMAND = "Невідома команда"
SERVICE_UNAVAILABLE = "Сервіс недоступний"
SEARCH_NO_RESULTS = "Не знайдено треків за цим запитом"

# ================================
# ⬇️ ЗАВАНТАЖЕННЯ
# ================================
DOWNLOADING_BUTTON = "Завантажуємо..."
STAGE_FETCH = "Завантажуємо аудіо"
STAGE_FETCH_COVER = "Завантажуємо обкладинку"
STAGE_PROCESS = "Додаємо метадані"
STAGE_UPLOAD = "Вивантажуємо файл"
DOWNLOAD_FAILED = "Не вдалося завантажити трек"
STALE_SELECTION = "Застаріле повідомлення"

# ================================
# 🚨 ПОМИЛКИ
# ================================
ERROR_CRITICAL = "❌ Критична помилка. Спробуйте пізніше."
ERROR_UNKNOWN = "⚠️ Невідома помилка."
ERROR_HTTP_TIMEOUT = "⏱️ Сервіс не відповів вчасно."
ERROR_HTTP_CONNECTION = "🌐 Не вдалося підʼєднатися до сервісу."
ERROR_HTTP_STATUS = "🌐 Сервіс відповів помилкою (HTTP {status_code})."
ERROR_TELEGRAM_RETRY_AFTER = "⏳ Telegram просить зачекати {seconds} с."
ERROR_TELEGRAM_GENERAL = "🤖 Помилка Telegram."
