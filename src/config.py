"""
Конфигурация бэкенда виджета.

Значения окружения читаются из .env (python-dotenv) при импорте.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(value, default=None):
    """Пустая строка из .env считается «не задано»"""
    return value if value else default


# =============================================================================
# СЕРВЕР
# =============================================================================

APP_ENV = os.getenv("APP_ENV", "development")

SERVER_CONFIG = {
    "host": os.getenv("HOST", "0.0.0.0"),
    "port": int(os.getenv("PORT", "3000")),
    "production": APP_ENV == "production",
    "origin_url": _env_flag(os.getenv("ORIGIN_URL")),
    "admin_token": _env_flag(os.getenv("ADMIN_TOKEN")),
    "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),

    # Лимиты запросов
    "query_max_length": 500,
    "rate_limit_window": 1.0,      # секунды
    "rate_limit_max": 3,           # запросов в окне на IP
    "upload_max_bytes": 10 * 1024 * 1024,
    "min_transcript_length": 3,
}


# =============================================================================
# ВНЕШНИЙ API ОТВЕТОВ
# =============================================================================

_db_api_base = _env_flag(os.getenv("DB_API_BASE"))

ANSWER_API_CONFIG = {
    # Без DB_API_BASE (или "fake") отвечает локальная база знаний
    "base_url": None if _db_api_base in (None, "fake") else _db_api_base.rstrip("/"),
    "api_key": _env_flag(os.getenv("DB_API_KEY")),
    "timeout": 10.0,
}


# =============================================================================
# РАСПОЗНАВАНИЕ РЕЧИ
# =============================================================================

STT_CONFIG = {
    "engine": os.getenv("STT_ENGINE", "mock"),   # "whisper" | "mock"
    "whisper_model": os.getenv("WHISPER_MODEL", "base"),
    "device": os.getenv("WHISPER_DEVICE", "cpu"),
    "compute_type": "int8",
    "default_language": "he",
}


# =============================================================================
# ТЕКСТЫ ОШИБОК ДЛЯ КЛИЕНТА
# =============================================================================

FALLBACK_RESPONSES = {
    "no_answer": "מצטער, לא מצאתי תשובה מתאימה.",
    "transcription_failed": "שגיאה בתמלול הקובץ. אנא נסו שוב.",
    "answer_failed": "שגיאה בקבלת תשובה מהמערכת",
    "stt_failed": "שגיאה בשירות זיהוי הקול",
    "connected": "מחובר לשיחה קולית",
}
