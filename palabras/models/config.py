import os

# Словарь конфигурационных параметров приложения
CONFIG = {
    "SESSION_SIZE": 10,                    # Количество слов в сессии
    "DEFAULT_USER_ID": "default_user",     # Ученик по умолчанию (без авторизации)

    # Интервальное повторение
    "REVIEW_INTERVALS_DAYS": [1, 3, 7, 14, 30, 90, 180],  # Интервал по уровню 0..6
    "STREAK_TO_ADVANCE": 2,                # Правильных подряд для повышения уровня
    "MASTERED_LEVEL": 5,                   # С этого уровня слово считается выученным
    "MISS_INTERVAL_DIVISOR": 3,            # После ошибки: интервал уровня / 3

    # Адаптивная сложность
    "EASE_WINDOW": 5,                      # Короткое окно для облегчения
    "EASE_ACCURACY_THRESHOLD": 0.70,       # Ниже - облегчаем
    "ESCALATE_WINDOW": 10,                 # Длинное окно для усложнения
    "ESCALATE_ACCURACY_THRESHOLD": 0.90,   # Выше - усложняем
    "MIN_OPTIONS": 2,
    "MAX_OPTIONS": 6,
    "EXTRA_TIME_FACTOR": 1.5,
    "MISTAKES_FOR_DUTCH_HINT": 2,          # Ошибок на слове до показа перевода

    # Игры
    "MEMORY_PAIRS": 6,                     # Пар карточек в игре "Memory"
    "MASTERED_PROGRESS_CORRECT": 3,        # Правильных ответов для mastered в прогрессе
}

# Размер шрифта -> CSS-токен
FONT_SIZE_TOKENS = {
    "normal": "text-base",
    "large": "text-lg",
    "extra-large": "text-xl",
}

DYSLEXIA_TOKEN = "font-dyslexic tracking-wide leading-relaxed"

# Категории словаря (id, название на нидерландском, эмодзи)
VOCABULARY_CATEGORIES = [
    {"id": "greetings", "name": "Begroetingen", "emoji": "👋"},
    {"id": "numbers_1_10", "name": "Getallen 1-10", "emoji": "🔢"},
    {"id": "colors", "name": "Kleuren", "emoji": "🌈"},
    {"id": "animals", "name": "Dieren", "emoji": "🐕"},
    {"id": "food", "name": "Eten", "emoji": "🍎"},
    {"id": "family", "name": "Familie", "emoji": "👨‍👩‍👧‍👦"},
    {"id": "body_parts", "name": "Lichaamsdelen", "emoji": "👤"},
    {"id": "weather", "name": "Weer", "emoji": "☀️"},
]

# Каталог для JSON-хранилища; без него всё живёт в памяти процесса
DATA_DIR = os.environ.get("PALABRAS_DATA_DIR")

LOG_LEVEL = os.environ.get("PALABRAS_LOG_LEVEL", "INFO")
