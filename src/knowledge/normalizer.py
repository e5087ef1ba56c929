"""
Нормализация текста для сравнения запроса с ключевыми словами.

Иврит регистра не имеет, но в базе встречаются латинские названия
("Be Fiber", "Mesh"), поэтому lower() обязателен. Невидимые
bidi-метки (LRM, RLM, ALM) ломают поиск подстроки — вырезаем их.
"""

import re
from dataclasses import dataclass
from typing import Any, Union


BIDI_MARKS_RE = re.compile("[\u200e\u200f\u061c]")


@dataclass(frozen=True)
class ValidQuery:
    """Запрос, пригодный для поиска"""
    text: str


@dataclass(frozen=True)
class InvalidQuery:
    """Запрос, который нельзя разобрать (None, не строка, пустая строка)"""
    reason: str


ParsedQuery = Union[ValidQuery, InvalidQuery]


class TextNormalizer:
    """Приводит запрос и ключевые слова к единой форме"""

    def normalize(self, text: str) -> str:
        """strip bidi → trim → lower. Идемпотентна."""
        return BIDI_MARKS_RE.sub("", text).strip().lower()

    def parse(self, raw: Any) -> ParsedQuery:
        """
        Проверка входа до запуска поиска.

        Пустая строка — невалидна; строка из пробелов валидна
        и просто не найдёт совпадений.
        """
        if raw is None:
            return InvalidQuery("query is missing")
        if not isinstance(raw, str):
            return InvalidQuery(f"query must be a string, got {type(raw).__name__}")
        if not raw:
            return InvalidQuery("query is empty")
        return ValidQuery(raw)
