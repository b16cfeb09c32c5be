from typing import Any, Optional


class RelayError(Exception):
    """A failed call to one of the external collaborators.

    ``stage`` names the pipeline step that failed and ``payload`` is what the
    caller gets back: the provider's error body when there is one, otherwise
    the error message.
    """

    stage = "relay"

    def __init__(self, payload: Any, message: Optional[str] = None):
        self.payload = payload
        super().__init__(message or str(payload))


class DownloadError(RelayError):
    stage = "download"


class TranscriptionError(RelayError):
    stage = "transcription"


class ClassificationError(RelayError):
    stage = "classification"


class DatastoreError(RelayError):
    stage = "datastore"
