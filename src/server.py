"""
HTTP/WebSocket бэкенд виджета.

Тонкий прокси: принимает запрос (текст или аудио), получает ответ
из базы знаний или внешнего API и отдаёт его в единой форме.

Запуск: python src/server.py
     или uvicorn server:create_app --factory --app-dir src
"""

import json
import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, File, Header, HTTPException, Request, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from answer_client import AnswerService, AnswerServiceError, build_answer_service
from config import FALLBACK_RESPONSES, SERVER_CONFIG, STT_CONFIG
from knowledge import KnowledgeMatcher
from rate_limit import RateLimiter
from transcriber import build_transcriber

logger = logging.getLogger(__name__)


class EntryCreate(BaseModel):
    """Новая запись базы знаний"""
    keyword: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    tags: List[str] = []
    confidence: float = Field(0.9, gt=0, le=1)
    voiceUrl: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def create_app(
    matcher: Optional[KnowledgeMatcher] = None,
    answer_service: Optional[AnswerService] = None,
    transcriber=None,
    rate_limiter: Optional[RateLimiter] = None,
    config: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """Собрать приложение; все зависимости можно подменить (тесты)"""
    config = {**SERVER_CONFIG, **(config or {})}
    matcher = matcher or KnowledgeMatcher()
    answer_service = answer_service or build_answer_service(matcher)
    transcriber = transcriber or build_transcriber()
    rate_limiter = rate_limiter or RateLimiter(
        max_requests=config["rate_limit_max"],
        window=config["rate_limit_window"],
    )

    app = FastAPI(title="Hebrew Chat Widget API")
    app.state.matcher = matcher
    app.state.answer_service = answer_service
    app.state.transcriber = transcriber
    app.state.rate_limiter = rate_limiter

    # В dev пускаем всех, в production — только свой origin
    if config["production"]:
        allow_origins = [config["origin_url"]] if config["origin_url"] else []
    else:
        allow_origins = ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return _error(500, "Internal server error")

    def require_admin(x_admin_token: Optional[str] = Header(None)):
        token = config["admin_token"]
        if token and not secrets.compare_digest((x_admin_token or "").encode(), token.encode()):
            raise HTTPException(status_code=401, detail="Invalid admin token")
        return True

    # =========================================================================
    # HTTP
    # =========================================================================

    @app.get("/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/api/ask")
    async def ask(request: Request):
        if rate_limiter.is_limited(_client_ip(request)):
            return _error(429, "Rate limit exceeded. Please try again.")

        try:
            payload = await request.json()
        except ValueError:
            return _error(400, "Request body must be valid JSON")
        if not isinstance(payload, dict):
            return _error(400, "Request body must be a JSON object")

        query = payload.get("query")
        session_id = payload.get("sessionId")

        if not isinstance(query, str) or not query.strip():
            return _error(400, "Query is required and must be a non-empty string")
        if len(query) > config["query_max_length"]:
            return _error(400, f"Query is too long (max {config['query_max_length']} characters)")

        try:
            return await run_in_threadpool(answer_service.ask, query, session_id)
        except AnswerServiceError as e:
            logger.error("API Error: %s", e)
            return _error(e.status_code, e.message)

    @app.post("/upload")
    async def upload(request: Request, audio: Optional[UploadFile] = File(None)):
        if audio is None:
            return _error(400, "No audio file provided")
        if not (audio.content_type or "").startswith("audio/"):
            return _error(400, "Only audio files are allowed")

        limit = config["upload_max_bytes"]
        if audio.size is not None and audio.size > limit:
            return _error(413, "Audio file is too large")
        data = await audio.read(limit + 1)
        if len(data) > limit:
            return _error(413, "Audio file is too large")

        lang = request.query_params.get("lang", STT_CONFIG["default_language"])
        try:
            transcript = await run_in_threadpool(transcriber.transcribe, data, lang)
        except Exception:
            logger.exception("Upload transcription error")
            return _error(500, FALLBACK_RESPONSES["transcription_failed"])
        logger.info("Transcribed %d bytes in %.2fs", len(data), transcript.elapsed)

        return {
            "transcript": transcript.text,
            "language": transcript.language,
            "confidence": transcript.confidence,
        }

    # =========================================================================
    # АДМИНКА БАЗЫ ЗНАНИЙ
    # =========================================================================

    @app.get("/api/admin/keywords")
    def admin_keywords(_=Depends(require_admin)):
        return {"keywords": matcher.list_keywords()}

    @app.get("/api/admin/stats")
    def admin_stats(_=Depends(require_admin)):
        return matcher.get_stats()

    @app.post("/api/admin/entries", status_code=201)
    def admin_add_entry(entry: EntryCreate, _=Depends(require_admin)):
        try:
            added = matcher.add_entry(
                entry.keyword,
                entry.answer,
                tags=entry.tags,
                confidence=entry.confidence,
                voice_url=entry.voiceUrl,
            )
        except ValueError as e:
            return _error(422, str(e))
        return {
            "keyword": added.keyword,
            "tags": list(added.tags),
            "confidence": added.confidence,
        }

    # =========================================================================
    # WEBSOCKET: живой разговор
    # =========================================================================

    async def send_answer(websocket: WebSocket, transcript: str, session_id: str):
        """Ответ на финальный транскрипт"""
        try:
            data = await run_in_threadpool(answer_service.ask, transcript, session_id)
        except Exception:
            logger.exception("Error handling final transcript")
            await websocket.send_json({"type": "error", "message": FALLBACK_RESPONSES["answer_failed"]})
            return

        await websocket.send_json({
            "type": "response",
            "text": data["answer"],
            "audioUrl": data["audioUrl"],
            "meta": data["meta"],
        })

    async def handle_audio(websocket: WebSocket, audio: bytes, lang: str, session_id: str):
        try:
            transcript = await run_in_threadpool(transcriber.transcribe, audio, lang)
        except Exception:
            logger.exception("Realtime transcription error")
            await websocket.send_json({"type": "error", "message": FALLBACK_RESPONSES["stt_failed"]})
            return

        await websocket.send_json({
            "type": "transcript_final",
            "text": transcript.text,
            "confidence": transcript.confidence,
            "language": transcript.language,
        })
        if transcript.text.strip():
            await send_answer(websocket, transcript.text, session_id)

    async def handle_text(websocket: WebSocket, raw: str, session_id: str):
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Invalid WebSocket message from %s", session_id)
            return

        if not isinstance(message, dict) or message.get("type") != "final_transcript":
            return
        text = message.get("text")
        if not isinstance(text, str):
            return

        transcript = text.strip()
        if len(transcript) < config["min_transcript_length"]:
            logger.info("Transcript too short, ignoring: %r", transcript)
            return
        await send_answer(websocket, transcript, session_id)

    @app.websocket("/realtime")
    async def realtime(websocket: WebSocket):
        await websocket.accept()
        lang = websocket.query_params.get("lang", STT_CONFIG["default_language"])
        session_id = websocket.query_params.get("session", "anonymous")
        logger.info("WebSocket connected: %s, lang: %s", session_id, lang)

        await websocket.send_json({
            "type": "connected",
            "message": FALLBACK_RESPONSES["connected"],
            "language": lang,
            "sessionId": session_id,
        })

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                if message.get("bytes") is not None:
                    await handle_audio(websocket, message["bytes"], lang, session_id)
                elif message.get("text") is not None:
                    await handle_text(websocket, message["text"], session_id)
        except WebSocketDisconnect:
            pass
        logger.info("WebSocket disconnected: %s", session_id)

    return app


def main():
    logging.basicConfig(
        level=SERVER_CONFIG["log_level"],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Environment: %s", "production" if SERVER_CONFIG["production"] else "development")
    uvicorn.run(create_app(), host=SERVER_CONFIG["host"], port=SERVER_CONFIG["port"])


if __name__ == "__main__":
    main()
