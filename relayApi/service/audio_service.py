import logging
import os
import uuid
from contextlib import contextmanager
from typing import Iterator
from urllib.parse import urlparse

import httpx

from relayApi.service.errors import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_EXTENSION = ".mp3"


def audio_extension(audio_url: str) -> str:
    """Extension of the remote file, used so the transcription service can sniff the format."""
    _, ext = os.path.splitext(urlparse(audio_url).path)
    ext = ext.lower()
    if not ext or len(ext) > 6 or not ext[1:].isalnum():
        return DEFAULT_AUDIO_EXTENSION
    return ext


@contextmanager
def temporary_audio_file(tmp_dir: str, audio_url: str) -> Iterator[str]:
    """Yield a path unique to this request and remove the file on exit."""
    os.makedirs(tmp_dir, exist_ok=True)
    file_path = os.path.join(tmp_dir, f"audio_{uuid.uuid4().hex}{audio_extension(audio_url)}")
    try:
        yield file_path
    finally:
        if os.path.exists(file_path):
            os.remove(file_path)


async def download_audio(client: httpx.AsyncClient, audio_url: str, file_path: str) -> int:
    """Stream ``audio_url`` into ``file_path``. Returns the number of bytes written."""
    written = 0
    try:
        async with client.stream("GET", audio_url) as response:
            response.raise_for_status()
            with open(file_path, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
                    written += len(chunk)
    except httpx.HTTPStatusError as e:
        raise DownloadError(
            f"Could not download audio file: HTTP {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise DownloadError(f"Could not download audio file: {str(e)}") from e
    except OSError as e:
        raise DownloadError(f"Could not write audio file: {str(e)}") from e

    logger.info("Downloaded %d bytes from %s", written, audio_url)
    return written
