"""
Speech-to-text для загруженных файлов и realtime-сокета.

whisper — faster-whisper локально (CPU, int8)
mock    — фиктивный транскрипт, когда модели нет
"""

import io
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config import STT_CONFIG

logger = logging.getLogger(__name__)


@dataclass
class Transcript:
    """Результат распознавания"""
    text: str
    language: str
    confidence: float = 0.95
    elapsed: float = 0.0


class MockTranscriber:
    """Заглушка: распознавания нет, возвращаем описание файла"""

    def transcribe(self, audio: bytes, language: str = "he") -> Transcript:
        return Transcript(
            text=f"תמלול מדומה של קובץ השמע ({len(audio)} bytes)",
            language=language,
        )


class WhisperTranscriber:
    """Распознавание через faster-whisper"""

    def __init__(
        self,
        model_size: str = "base",
        device: str = "cpu",
        compute_type: str = "int8",
    ):
        from faster_whisper import WhisperModel

        logger.info("Loading Whisper model (%s)...", model_size)
        start = time.time()
        self.model = WhisperModel(
            model_size,
            device=device,
            compute_type=compute_type,
        )
        logger.info("Whisper loaded in %.2fs", time.time() - start)

    def transcribe(self, audio: bytes, language: str = "he") -> Transcript:
        start = time.time()
        segments, info = self.model.transcribe(
            io.BytesIO(audio),
            language=language,
            beam_size=5,
            vad_filter=True,
        )
        text = " ".join(segment.text for segment in segments).strip()
        return Transcript(
            text=text,
            language=language,
            confidence=round(float(info.language_probability), 2),
            elapsed=time.time() - start,
        )


def build_transcriber(config: Optional[Dict[str, Any]] = None):
    """Выбор движка по STT_CONFIG["engine"]"""
    config = config or STT_CONFIG
    engine = config.get("engine", "mock")

    if engine == "whisper":
        return WhisperTranscriber(
            config.get("whisper_model", "base"),
            device=config.get("device", "cpu"),
            compute_type=config.get("compute_type", "int8"),
        )
    if engine != "mock":
        raise ValueError(f"Unknown STT engine: {engine!r}")

    logger.warning("Whisper STT disabled - using mock transcription")
    return MockTranscriber()
