"""
Матчер ключевых слов для виджета.

Стратегия:
1. Проход 1 — ключевое слово целиком входит в запрос как подстрока
   (точное совпадение > вхождение, раньше в тексте > позже)
2. Проход 2 — только если проход 1 ничего не нашёл: пересечение по словам
   (многословные ключи, другой порядок слов)
3. Победитель должен набрать больше MATCH_THRESHOLD, иначе — дефолтный ответ
"""

import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .base import DEFAULT_ENTRY_CONFIDENCE, KnowledgeBase, KnowledgeEntry
from .data import DEFAULT_FUNCTION_WORDS, build_default_knowledge
from .normalizer import InvalidQuery, TextNormalizer

logger = logging.getLogger(__name__)


# Жёсткие константы скоринга — не параметры вызова
EXACT_MATCH_BASE = 1.0
SUBSTRING_MATCH_BASE = 0.8
POSITION_PENALTY = 0.02
FUNCTION_WORD_FACTOR = 0.5
WORD_OVERLAP_WEIGHT = 0.8
MATCH_THRESHOLD = 0.3
MAX_CONFIDENCE = 0.95

DEFAULT_CONFIDENCE = 0.4
ERROR_CONFIDENCE = 0.1

DEFAULT_ANSWER = (
    "זו שאלה מעניינת! אני עדיין לומד ואוסף מידע. "
    "תוכל לשאול על כל מוצרי האינטרנט של בזק או על איך לדבר איתנו?"
)
ERROR_ANSWER = "לא הבנתי את השאלה. אנא נסה שוב."

DEFAULT_TAGS = ("default", "no-match")
ERROR_TAGS = ("error",)

_result_counter = itertools.count(1)


def _make_result_id(prefix: str) -> str:
    """MOCK_/DEFAULT_/ERROR_ + миллисекунды + счётчик (уникален в рамках процесса)"""
    return f"{prefix}_{int(time.time() * 1000)}_{next(_result_counter)}"


@dataclass(frozen=True)
class MatchResult:
    """Результат одного запроса"""
    answer: str
    confidence: float
    tags: Tuple[str, ...]
    result_id: str
    voice_url: Optional[str] = None
    matched_keyword: Optional[str] = None
    # Сырой score победителя, для отладки (у fallback/error — None)
    score: Optional[float] = field(default=None, compare=False)

    @property
    def is_match(self) -> bool:
        return self.matched_keyword is not None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-форма, которую ждёт фронтенд"""
        return {
            "answer": self.answer,
            "voiceUrl": self.voice_url,
            "confidence": self.confidence,
            "tags": list(self.tags),
            "matchedKeyword": self.matched_keyword,
            "id": self.result_id,
        }


class KnowledgeMatcher:
    """Эвристический матчер: подстрока, затем пересечение слов"""

    def __init__(
        self,
        kb: Optional[KnowledgeBase] = None,
        function_words: Optional[Iterable[str]] = None,
        normalizer: Optional[TextNormalizer] = None,
    ):
        self.kb = kb if kb is not None else build_default_knowledge()
        self.normalizer = normalizer or TextNormalizer()
        if function_words is None:
            function_words = DEFAULT_FUNCTION_WORDS
        self.function_words: FrozenSet[str] = frozenset(
            self.normalizer.normalize(w) for w in function_words
        )

    def query(self, text: Any) -> MatchResult:
        """
        Найти ответ для запроса.

        Args:
            text: Сырой текст пользователя (может прийти что угодно)

        Returns:
            MatchResult; невалидный вход даёт ERROR-результат, а не исключение
        """
        parsed = self.normalizer.parse(text)
        if isinstance(parsed, InvalidQuery):
            logger.warning("Unparseable query: %s", parsed.reason)
            return MatchResult(
                answer=ERROR_ANSWER,
                confidence=ERROR_CONFIDENCE,
                tags=ERROR_TAGS,
                result_id=_make_result_id("ERROR"),
            )

        normalized_query = self.normalizer.normalize(parsed.text)
        logger.debug("Knowledge query: %r", normalized_query)

        entries = self.kb.snapshot()

        # Шаг 1: подстрока
        best_entry, best_score = self._substring_pass(normalized_query, entries)

        # Шаг 2: пересечение слов, если подстрок не нашлось
        if best_entry is None:
            best_entry, best_score = self._word_overlap_pass(normalized_query, entries)

        if best_entry is not None and best_score > MATCH_THRESHOLD:
            logger.info("Matched %r (score: %.2f)", best_entry.keyword, best_score)
            return MatchResult(
                answer=best_entry.answer,
                confidence=min(best_score, MAX_CONFIDENCE),
                tags=best_entry.tags,
                result_id=_make_result_id("MOCK"),
                voice_url=best_entry.voice_url,
                matched_keyword=best_entry.keyword,
                score=best_score,
            )

        logger.info("No match for %r", normalized_query)
        return MatchResult(
            answer=DEFAULT_ANSWER,
            confidence=DEFAULT_CONFIDENCE,
            tags=DEFAULT_TAGS,
            result_id=_make_result_id("DEFAULT"),
        )

    def _substring_pass(
        self,
        normalized_query: str,
        entries: List[KnowledgeEntry]
    ) -> Tuple[Optional[KnowledgeEntry], float]:
        """Ключевое слово целиком внутри запроса"""
        best_entry = None
        best_score = 0.0

        for entry in entries:
            keyword = self.normalizer.normalize(entry.keyword)
            position = normalized_query.find(keyword)
            if position < 0:
                continue

            score = EXACT_MATCH_BASE if normalized_query == keyword else SUBSTRING_MATCH_BASE
            score -= position * POSITION_PENALTY
            score *= entry.confidence

            if keyword in self.function_words:
                score *= FUNCTION_WORD_FACTOR

            # Строго больше: при равенстве остаётся первая запись
            if score > best_score:
                best_entry, best_score = entry, score

        return best_entry, best_score

    def _word_overlap_pass(
        self,
        normalized_query: str,
        entries: List[KnowledgeEntry]
    ) -> Tuple[Optional[KnowledgeEntry], float]:
        """Доля слов ключа, встречающихся внутри слов запроса"""
        best_entry = None
        best_score = 0.0
        query_words = normalized_query.split()

        for entry in entries:
            keyword = self.normalizer.normalize(entry.keyword)
            keyword_words = keyword.split()
            if not keyword_words:
                continue

            matching_words = 0
            for keyword_word in keyword_words:
                if len(keyword_word) <= 1:
                    continue
                # Ищем слово ключа внутри слова запроса (префиксы иврита: ה, ב, ל...)
                if any(keyword_word in query_word for query_word in query_words):
                    matching_words += 1

            # Ключ целиком в запросе — полный балл. После прохода 1
            # сюда не попасть, но поведение сохраняем.
            if keyword in normalized_query:
                matching_words = max(matching_words, len(keyword_words))

            if matching_words > 0:
                score = matching_words / len(keyword_words) * entry.confidence * WORD_OVERLAP_WEIGHT
                if score > best_score:
                    best_entry, best_score = entry, score

        return best_entry, best_score

    # =========================================================================
    # АДМИНИСТРИРОВАНИЕ
    # =========================================================================

    def add_entry(
        self,
        keyword: str,
        answer: str,
        tags: Optional[Iterable[str]] = None,
        confidence: float = DEFAULT_ENTRY_CONFIDENCE,
        voice_url: Optional[str] = None,
    ) -> KnowledgeEntry:
        """Добавить запись (совпадающий keyword перезаписывается)"""
        entry = self.kb.add_entry(keyword, answer, tags, confidence, voice_url)
        logger.info("Added knowledge entry: %r", keyword)
        return entry

    def list_keywords(self) -> List[str]:
        """Все ключевые слова в порядке вставки"""
        return self.kb.list_keywords()

    def get_stats(self) -> Dict[str, Any]:
        """Статистика базы: размер, гистограмма тегов, ключи"""
        return {
            "totalEntries": len(self.kb),
            "tagCounts": self.kb.tag_counts(),
            "availableKeywords": self.list_keywords(),
        }
