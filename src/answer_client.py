"""
Источник ответов для виджета: локальная база знаний или внешний API поиска ответов.

Оба источника приводятся к одной форме:
    {"answer": str, "audioUrl": str|None, "meta": {"id", "confidence", "tags"}}
"""

import logging
from typing import Any, Dict, Optional

import requests

from config import ANSWER_API_CONFIG, FALLBACK_RESPONSES
from knowledge import KnowledgeMatcher

logger = logging.getLogger(__name__)


class AnswerServiceError(Exception):
    """Ошибка внешнего сервиса ответов (status — что отдаём клиенту)"""
    status_code = 503
    message = "External service error. Please try again later."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ServiceUnavailableError(AnswerServiceError):
    message = "Service temporarily unavailable. Please try again later."


class UpstreamAuthError(AnswerServiceError):
    message = "Authentication error with external service."


class UpstreamRateLimitError(AnswerServiceError):
    status_code = 429
    message = "External service rate limit exceeded. Please try again later."


class UpstreamTimeoutError(AnswerServiceError):
    status_code = 408
    message = "Request timeout. Please try again."


class UpstreamError(AnswerServiceError):
    pass


class AnswerSearchClient:
    """HTTP-клиент внешнего API: POST {base}/answers/search {"q": ...}"""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, query: str) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = self.session.post(
                f"{self.base_url}/answers/search",
                json={"q": query},
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise UpstreamTimeoutError() from e
        except requests.ConnectionError as e:
            raise ServiceUnavailableError() from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error("Answer API returned %s", status)
            if status == 401:
                raise UpstreamAuthError() from e
            if status == 429:
                raise UpstreamRateLimitError() from e
            raise UpstreamError() from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Answer API returned invalid JSON")
            raise UpstreamError() from e
        if not isinstance(data, dict):
            logger.error("Answer API returned %s instead of an object", type(data).__name__)
            raise UpstreamError()
        return data


def normalize_answer(data: Dict[str, Any]) -> Dict[str, Any]:
    """Приводим ответ любого источника к форме виджета"""
    return {
        "answer": data.get("answerText") or data.get("answer") or FALLBACK_RESPONSES["no_answer"],
        "audioUrl": data.get("audioUrl") or data.get("voiceUrl") or None,
        "meta": {
            "id": data.get("answerId") or data.get("id") or None,
            "confidence": data.get("confidence") or None,
            "tags": data.get("tags") or [],
        },
    }


class AnswerService:
    """Маршрутизация запроса: внешний API если настроен, иначе локальный матчер"""

    def __init__(
        self,
        matcher: KnowledgeMatcher,
        client: Optional[AnswerSearchClient] = None,
    ):
        self.matcher = matcher
        self.client = client

    @property
    def uses_mock(self) -> bool:
        return self.client is None

    def ask(self, query: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        """Получить нормализованный ответ на запрос"""
        query = query.strip()
        logger.info("Answering %r (session: %s)", query, session_id or "anonymous")

        if self.client is None:
            result = self.matcher.query(query)
            if not result.is_match:
                logger.info("No knowledge match for %r (tags: %s)", query, list(result.tags))
            data = result.to_dict()
        else:
            data = self.client.search(query)

        return normalize_answer(data)


def build_answer_service(matcher: KnowledgeMatcher, config: Optional[Dict[str, Any]] = None) -> AnswerService:
    """Собрать сервис по ANSWER_API_CONFIG"""
    config = config or ANSWER_API_CONFIG
    client = None
    if config.get("base_url"):
        client = AnswerSearchClient(
            config["base_url"],
            api_key=config.get("api_key"),
            timeout=config.get("timeout", 10.0),
        )
        logger.info("Using external answer API: %s", config["base_url"])
    else:
        logger.warning("Answer API not configured - using local knowledge base")
    return AnswerService(matcher, client)
