"""
Структура базы знаний виджета.
Каждая запись (Entry) содержит:
- keyword: ключевая фраза (одно слово или несколько), регистр сохраняется
- answer: текст ответа
- voice_url: путь к заранее записанному аудио (None → синтез речи на клиенте)
- confidence: авторский вес записи (0, 1]
- tags: категории для аналитики, в поиске не участвуют
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .normalizer import TextNormalizer


DEFAULT_ENTRY_CONFIDENCE = 0.9
DEFAULT_ENTRY_TAGS = ("custom",)


@dataclass(frozen=True)
class KnowledgeEntry:
    """Одна запись базы знаний"""
    keyword: str                        # "שלום", "Be Fiber", "עבודה מהבית"
    answer: str                         # Текст ответа
    voice_url: Optional[str] = None     # "/voice/shalom_greeting.wav"
    confidence: float = DEFAULT_ENTRY_CONFIDENCE
    tags: Tuple[str, ...] = ()          # ("greeting", "hello")

    def __post_init__(self):
        # Пустой после нормализации ключ нашёлся бы в любом запросе
        if not TextNormalizer().normalize(self.keyword):
            raise ValueError(f"Entry keyword {self.keyword!r} is empty after normalization")
        if not 0 < self.confidence <= 1:
            raise ValueError(
                f"Entry {self.keyword!r}: confidence must be in (0, 1], got {self.confidence}"
            )
        # Списки из конфигов приводим к кортежу, чтобы запись оставалась неизменяемой
        object.__setattr__(self, "tags", tuple(self.tags))


class KnowledgeBase:
    """
    База знаний целиком: упорядоченная таблица keyword → KnowledgeEntry.

    Порядок вставки важен: при равном score побеждает запись,
    добавленная раньше. Записи не удаляются, add_entry только
    добавляет или перезаписывает (last writer wins).
    """

    def __init__(self, entries: Iterable[KnowledgeEntry] = ()):
        self._entries: "OrderedDict[str, KnowledgeEntry]" = OrderedDict()
        self._lock = threading.RLock()
        for entry in entries:
            self._entries[entry.keyword] = entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, keyword: str) -> bool:
        with self._lock:
            return keyword in self._entries

    def get(self, keyword: str) -> Optional[KnowledgeEntry]:
        """Получить запись по ключевому слову"""
        with self._lock:
            return self._entries.get(keyword)

    def snapshot(self) -> List[KnowledgeEntry]:
        """Копия записей в порядке вставки — для чтения без удержания блокировки"""
        with self._lock:
            return list(self._entries.values())

    def add_entry(
        self,
        keyword: str,
        answer: str,
        tags: Optional[Iterable[str]] = None,
        confidence: float = DEFAULT_ENTRY_CONFIDENCE,
        voice_url: Optional[str] = None,
    ) -> KnowledgeEntry:
        """Добавить или перезаписать запись (пустые теги → ["custom"])"""
        tags = tuple(tags) if tags else DEFAULT_ENTRY_TAGS
        entry = KnowledgeEntry(
            keyword=keyword,
            answer=answer,
            voice_url=voice_url,
            confidence=confidence,
            tags=tags,
        )
        with self._lock:
            self._entries[keyword] = entry
        return entry

    def list_keywords(self) -> List[str]:
        """Все ключевые слова в порядке вставки"""
        with self._lock:
            return list(self._entries.keys())

    def get_by_tag(self, tag: str) -> List[KnowledgeEntry]:
        """Получить все записи с тегом"""
        return [e for e in self.snapshot() if tag in e.tags]

    def tag_counts(self) -> Dict[str, int]:
        """Гистограмма тегов: запись даёт +1 каждому своему тегу"""
        counts: Dict[str, int] = {}
        for entry in self.snapshot():
            for tag in entry.tags:
                counts[tag] = counts.get(tag, 0) + 1
        return counts
