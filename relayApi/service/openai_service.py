import asyncio
import logging
import math
import os
from typing import List, Optional

import openai
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from relayApi.service.errors import TranscriptionError

logger = logging.getLogger(__name__)

# Upload limit of the transcription endpoint
MAX_UPLOAD_MB = 25.0

# ffmpeg muxer names for extensions that differ from them
EXPORT_FORMATS = {
    "m4a": "ipod",
    "aac": "adts",
    "oga": "ogg",
    "mpga": "mp3",
}


def export_format_for(ext: str) -> str:
    ext = ext.lstrip(".").lower() or "mp3"
    return EXPORT_FORMATS.get(ext, ext)


def _create_transcription(client: openai.OpenAI, file_path: str, language: str, model: str) -> str:
    with open(file_path, "rb") as audio_file:
        transcript = client.audio.transcriptions.create(
            file=audio_file,
            model=model,
            language=language,
            response_format="text"
        )
    # response_format="text" gives a plain string; older SDKs return an object
    return transcript if isinstance(transcript, str) else transcript.text


def _split_into_chunks(file_path: str, file_size_mb: float, chunk_paths: List[str]) -> None:
    """Export the chunks of ``file_path``, recording each path in ``chunk_paths`` before writing it."""
    audio = AudioSegment.from_file(file_path)
    num_chunks = math.ceil(file_size_mb / MAX_UPLOAD_MB)
    chunk_duration = len(audio) // num_chunks
    base, ext = os.path.splitext(file_path)
    export_format = export_format_for(ext)
    for i in range(num_chunks):
        start_time = i * chunk_duration
        end_time = (i + 1) * chunk_duration if i < num_chunks - 1 else len(audio)
        chunk_path = f"{base}_chunk_{i}{ext}"
        chunk_paths.append(chunk_path)
        audio[start_time:end_time].export(chunk_path, format=export_format)


def transcribe_file(client: Optional[openai.OpenAI], file_path: str, language: str, model: str = "whisper-1") -> str:
    """Transcribe a local audio file, splitting it when it exceeds the upload limit."""
    if client is None:
        raise TranscriptionError("OPENAI_API_KEY not found in environment variables")
    try:
        file_size_mb = os.path.getsize(file_path) / (1024 * 1024)
        if file_size_mb <= MAX_UPLOAD_MB:
            return _create_transcription(client, file_path, language, model).strip()

        logger.info("Audio is %.1f MB, transcribing in chunks", file_size_mb)
        chunk_paths = []
        transcripts = []
        try:
            _split_into_chunks(file_path, file_size_mb, chunk_paths)
            for chunk_path in chunk_paths:
                transcripts.append(_create_transcription(client, chunk_path, language, model).strip())
        finally:
            for chunk_path in chunk_paths:
                if os.path.exists(chunk_path):
                    os.remove(chunk_path)
        return " ".join(transcripts)
    except openai.APIStatusError as e:
        raise TranscriptionError(e.body if e.body is not None else e.message) from e
    except openai.OpenAIError as e:
        raise TranscriptionError(str(e)) from e
    except CouldntDecodeError as e:
        raise TranscriptionError(f"Could not split audio file: {str(e)}") from e
    except OSError as e:
        raise TranscriptionError(f"Transcription failed: {str(e)}") from e


async def transcribe_audio(client: Optional[openai.OpenAI], file_path: str, language: str, model: str = "whisper-1") -> str:
    return await asyncio.to_thread(transcribe_file, client, file_path, language, model)
