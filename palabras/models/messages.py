# Тексты сообщений для детей (нидерландский интерфейс)

# Сообщения ошибок
ERROR_MESSAGES = {
    "unknown_word": "Dit woord kennen we niet.",
    "no_words": "Er zijn nog geen woorden om te oefenen.",
    "session_not_found": "Dit spel bestaat niet.",
    "invalid_request": "Er ging iets mis met je antwoord.",
    "general_error": "Oeps, er ging iets mis. Probeer het nog eens.",
}

# Сообщения успеха
SUCCESS_MESSAGES = {
    "correct_answer": "Goed zo!",
    "settings_saved": "Instellingen opgeslagen.",
}

# Сообщения о результатах
RESULT_MESSAGES = {
    "wrong_answer": "Bijna! Het goede antwoord is «{}»",
    "encourage": "Je doet het goed, we maken het even wat makkelijker!",
}
