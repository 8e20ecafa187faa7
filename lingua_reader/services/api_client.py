"""HTTP client for the reading backend, plus payload normalization."""

import logging
from typing import Any

import requests

from lingua_reader.config import LinguaReaderConfig
from lingua_reader.exceptions import ApiConnectionError, PersistenceError
from lingua_reader.models import SavedProgress, VocabularyTerm
from lingua_reader.services.vocabulary_snapshot import build_term

logger = logging.getLogger(__name__)

TRACK_ID_FIELDS = ("currentAudiobookTrackId", "trackId", "unitId")
POSITION_FIELDS = ("currentAudiobookPosition", "currentPosition", "positionSeconds")


def _field(payload: dict[str, Any], *names: str, default: Any = None) -> Any:
    """Read the first present field, matching names case-insensitively."""
    lowered = {str(key).lower(): value for key, value in payload.items()}
    for name in names:
        value = lowered.get(name.lower())
        if value is not None:
            return value
    return default


def term_from_api(
    payload: dict[str, Any], substitutions: tuple[tuple[str, str], ...] = ()
) -> VocabularyTerm:
    """Normalize a backend word record into a VocabularyTerm.

    Accepts ``termId``/``wordId``/``id`` in any casing.

    Raises:
        PersistenceError: If the record has no term text or an invalid status
    """
    text = _field(payload, "term", "displayTerm")
    if not isinstance(text, str) or not text.strip():
        raise PersistenceError(f"Word record without term text: {payload!r}")
    try:
        status = int(_field(payload, "status", default=0))
        term_id = _field(payload, "termId", "wordId", "id")
        return build_term(
            text,
            status=status,
            translation=_field(payload, "translation"),
            term_id=int(term_id) if term_id is not None else None,
            substitutions=substitutions,
        )
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Invalid word record {payload!r}: {e}") from e


def progress_from_api(payload: Any) -> SavedProgress | None:
    """Normalize audiobook or audio-lesson progress into SavedProgress.

    Both backend shapes (``currentAudiobookTrackId``/``currentAudiobookPosition``
    and ``currentPosition``) map onto the same model here and nowhere else.

    Returns:
        SavedProgress, or None when nothing usable was saved
    """
    if not isinstance(payload, dict):
        return None
    unit_id = _field(payload, *TRACK_ID_FIELDS)
    position = _field(payload, *POSITION_FIELDS)
    if position is None:
        return None
    try:
        return SavedProgress(
            unit_id=int(unit_id) if unit_id is not None else None,
            position_seconds=max(0.0, float(position)),
        )
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed progress payload: {payload!r}")
        return None


class LinguaReadApiClient:
    """Client for the reading backend's REST API (stateless service).

    Implements the vocabulary store protocol directly; progress and
    analytics protocols are provided by the adapters in ``progress_stores``.
    """

    def __init__(self, config: LinguaReaderConfig):
        """Initialize the client.

        Args:
            config: Configuration with API URL, token and timeout
        """
        self.config = config
        self.base_url = config.api_base_url.rstrip("/")
        self.substitutions: tuple[tuple[str, str], ...] = ()

    # --- Vocabulary ---

    def fetch_all_terms(self, language_id: int) -> list[VocabularyTerm]:
        """Get every tracked term for a language."""
        data = self._request("GET", f"/words/language/{language_id}")
        if not isinstance(data, list):
            raise PersistenceError(f"Unexpected words payload for language {language_id}")
        terms = []
        for record in data:
            try:
                terms.append(term_from_api(record, self.substitutions))
            except PersistenceError as e:
                logger.warning(f"Skipping word record: {e}")
        return terms

    def create_term(
        self, container_id: int, term: str, status: int, translation: str | None
    ) -> VocabularyTerm:
        """Create a word from within a text."""
        if not term or not term.strip():
            raise ValueError("Word term is required")
        data = self._request(
            "POST",
            "/words",
            {
                "textId": container_id,
                "term": term.strip(),
                "status": status,
                "translation": translation or None,
            },
        )
        return term_from_api(data, self.substitutions)

    def update_term(self, term_id: int, status: int, translation: str | None) -> VocabularyTerm:
        """Update a word's status and translation."""
        data = self._request(
            "PUT",
            f"/words/{term_id}",
            {"status": status, "translation": translation or None},
        )
        return term_from_api(data, self.substitutions)

    def batch_add_terms(self, language_id: int, terms: list[dict]) -> dict:
        """Add many terms at once; returns the backend summary."""
        data = self._request("POST", "/words/batch", {"languageId": language_id, "terms": terms})
        return data if isinstance(data, dict) else {"result": data}

    # --- Progress ---

    def get_audiobook_progress(self, book_id: int) -> SavedProgress | None:
        """Last saved track and position of an audiobook."""
        data = self._request("GET", f"/activity/audiobookprogress/{book_id}", allow_not_found=True)
        return progress_from_api(data)

    def update_audiobook_progress(
        self, book_id: int, track_id: int | None, position_seconds: float | None
    ) -> None:
        """Save the current track and position of an audiobook."""
        self._request(
            "PUT",
            "/activity/audiobookprogress",
            {
                "bookId": book_id,
                "currentAudiobookTrackId": track_id,
                "currentAudiobookPosition": position_seconds,
            },
        )

    def get_audio_lesson_progress(self, text_id: int) -> SavedProgress | None:
        """Last saved position of a single-file audio lesson."""
        data = self._request(
            "GET", f"/activity/audiolessonprogress/{text_id}", allow_not_found=True
        )
        return progress_from_api(data)

    def update_audio_lesson_progress(self, text_id: int, position_seconds: float | None) -> None:
        """Save the position of a single-file audio lesson."""
        self._request(
            "PUT",
            "/activity/audiolessonprogress",
            {"textId": text_id, "currentPosition": position_seconds},
        )

    # --- Analytics ---

    def log_listening(self, language_id: int, duration_seconds: int) -> None:
        """Record listening time for a language."""
        self._request(
            "POST",
            "/activity/logListening",
            {"languageId": language_id, "durationSeconds": duration_seconds},
        )

    # --- Transport ---

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        """Send one JSON request.

        Returns:
            Decoded JSON body, ``{"message": text}`` for non-JSON bodies, or
            None for a 404 when ``allow_not_found`` is set

        Raises:
            ApiConnectionError: If the backend cannot be reached
            PersistenceError: For HTTP errors and undecodable responses
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.config.api_token and self.config.api_token.strip():
            headers["Authorization"] = f"Bearer {self.config.api_token.strip()}"

        try:
            response = requests.request(
                method,
                url,
                json=payload,
                headers=headers,
                timeout=self.config.request_timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise ApiConnectionError(f"Cannot connect to backend at {self.base_url}") from e
        except requests.RequestException as e:
            raise PersistenceError(f"{method} {endpoint} failed: {e}") from e

        if allow_not_found and response.status_code == 404:
            return None

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"{method} {endpoint} failed with status {response.status_code}: {message}")
            raise PersistenceError(message)

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError as e:
                raise PersistenceError(f"Invalid JSON from {endpoint}: {e}") from e
        return {"message": response.text or response.reason}

    @staticmethod
    def _error_message(response) -> str:
        """Best-effort error text from a failed response."""
        fallback = f"HTTP error! Status: {response.status_code}"
        if "application/json" in response.headers.get("content-type", ""):
            try:
                body = response.json()
            except ValueError:
                return fallback
            if isinstance(body, dict) and body.get("message"):
                return str(body["message"])
            return fallback
        return response.text or fallback
