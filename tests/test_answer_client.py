"""
Тесты источника ответов: внешний API, нормализация, маршрутизация.
"""

import sys
import os
from unittest.mock import MagicMock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest
import requests

from answer_client import (
    AnswerSearchClient,
    AnswerService,
    ServiceUnavailableError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    build_answer_service,
    normalize_answer,
)
from knowledge import KnowledgeMatcher


def make_client(api_key=None):
    session = MagicMock()
    client = AnswerSearchClient("https://answers.test/", api_key=api_key, timeout=10.0, session=session)
    return client, session


def http_error(status):
    return requests.HTTPError(response=MagicMock(status_code=status))


class TestAnswerSearchClient:
    """HTTP-клиент внешнего API"""

    def test_posts_query(self):
        client, session = make_client()
        session.post.return_value.json.return_value = {"answerText": "תשובה"}

        data = client.search("שלום")

        assert data == {"answerText": "תשובה"}
        args, kwargs = session.post.call_args
        assert args[0] == "https://answers.test/answers/search"
        assert kwargs["json"] == {"q": "שלום"}
        assert kwargs["timeout"] == 10.0
        assert "Authorization" not in kwargs["headers"]

    def test_bearer_token(self):
        client, session = make_client(api_key="secret")
        session.post.return_value.json.return_value = {}

        client.search("x")

        headers = session.post.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer secret"

    @pytest.mark.parametrize("exc, expected", [
        (requests.Timeout(), UpstreamTimeoutError),
        (requests.ConnectTimeout(), UpstreamTimeoutError),
        (requests.ConnectionError(), ServiceUnavailableError),
    ])
    def test_network_errors(self, exc, expected):
        client, session = make_client()
        session.post.side_effect = exc
        with pytest.raises(expected):
            client.search("x")

    @pytest.mark.parametrize("status, expected, code", [
        (401, UpstreamAuthError, 503),
        (429, UpstreamRateLimitError, 429),
        (500, UpstreamError, 503),
        (404, UpstreamError, 503),
    ])
    def test_http_errors(self, status, expected, code):
        client, session = make_client()
        session.post.return_value.raise_for_status.side_effect = http_error(status)
        with pytest.raises(expected) as excinfo:
            client.search("x")
        assert excinfo.value.status_code == code

    def test_invalid_json_body(self):
        client, session = make_client()
        session.post.return_value.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        with pytest.raises(UpstreamError):
            client.search("x")

    @pytest.mark.parametrize("payload", [[], "text", None])
    def test_non_object_body(self, payload):
        client, session = make_client()
        session.post.return_value.json.return_value = payload
        with pytest.raises(UpstreamError):
            client.search("x")

    def test_timeout_status(self):
        assert UpstreamTimeoutError().status_code == 408
        assert UpstreamTimeoutError().message == "Request timeout. Please try again."


class TestNormalizeAnswer:
    """Единая форма ответа для виджета"""

    def test_external_shape(self):
        data = normalize_answer({
            "answerId": "A1",
            "answerText": "תשובה",
            "confidence": 0.8,
            "tags": ["demo"],
            "audioUrl": "/audio/1.mp3",
        })
        assert data == {
            "answer": "תשובה",
            "audioUrl": "/audio/1.mp3",
            "meta": {"id": "A1", "confidence": 0.8, "tags": ["demo"]},
        }

    def test_knowledge_shape(self):
        """Форма MatchResult.to_dict(): answer / voiceUrl / id"""
        data = normalize_answer({
            "answer": "שלום וברכה",
            "voiceUrl": "/voice/shalom_greeting.wav",
            "confidence": 0.95,
            "tags": ["greeting"],
            "matchedKeyword": "שלום",
            "id": "MOCK_1",
        })
        assert data["answer"] == "שלום וברכה"
        assert data["audioUrl"] == "/voice/shalom_greeting.wav"
        assert data["meta"]["id"] == "MOCK_1"

    def test_empty_payload(self):
        data = normalize_answer({})
        assert data["answer"] == "מצטער, לא מצאתי תשובה מתאימה."
        assert data["audioUrl"] is None
        assert data["meta"] == {"id": None, "confidence": None, "tags": []}


class TestAnswerService:
    """Маршрутизация запроса"""

    def test_uses_matcher_without_client(self):
        service = AnswerService(KnowledgeMatcher())
        assert service.uses_mock

        data = service.ask("  שלום  ", session_id="s1")

        assert data["answer"] == "שלום וברכה! איך אוכל לעזור לך היום?"
        assert data["audioUrl"] == "/voice/shalom_greeting.wav"
        assert data["meta"]["tags"] == ["greeting", "hello"]
        assert data["meta"]["id"].startswith("MOCK_")

    def test_no_match_logged(self, caplog):
        service = AnswerService(KnowledgeMatcher())
        with caplog.at_level("INFO", logger="answer_client"):
            data = service.ask("xyz")
        assert data["meta"]["tags"] == ["default", "no-match"]
        assert "No knowledge match for 'xyz'" in caplog.text

    def test_uses_client_when_configured(self):
        client = MagicMock()
        client.search.return_value = {"answerText": "from api", "answerId": "X"}
        service = AnswerService(KnowledgeMatcher(), client)

        data = service.ask("  שאלה  ")

        client.search.assert_called_once_with("שאלה")
        assert data["answer"] == "from api"
        assert data["meta"]["id"] == "X"

    def test_client_errors_propagate(self):
        client = MagicMock()
        client.search.side_effect = UpstreamRateLimitError()
        service = AnswerService(KnowledgeMatcher(), client)
        with pytest.raises(UpstreamRateLimitError):
            service.ask("x")

    def test_build_without_base_url(self):
        service = build_answer_service(KnowledgeMatcher(), {"base_url": None})
        assert service.uses_mock

    def test_build_with_base_url(self):
        service = build_answer_service(
            KnowledgeMatcher(),
            {"base_url": "https://answers.test", "api_key": "k", "timeout": 5.0},
        )
        assert not service.uses_mock
        assert service.client.base_url == "https://answers.test"
        assert service.client.timeout == 5.0
