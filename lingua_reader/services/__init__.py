"""Services for Lingua Reader."""

from .api_client import LinguaReadApiClient, progress_from_api, term_from_api
from .bookmark_store import BookmarkStore
from .key_value_store import InMemoryKeyValueStore, JsonKeyValueStore
from .lexical_annotator import LexicalAnnotator, find_untracked_words, tokenize
from .progress_stores import (
    ApiListeningAnalytics,
    AudiobookProgressStore,
    AudioLessonProgressStore,
    InMemoryListeningAnalytics,
    InMemoryProgressStore,
    SequencedProgressStore,
)
from .sentence_segmenter import SentenceSegmenter, segment, sentence_text
from .subtitle_timeline import (
    SubtitleTimeline,
    load_subtitle_file,
    lookup,
    parse_srt,
    serialize_srt,
)
from .vocabulary_service import VocabularyService
from .vocabulary_snapshot import VocabularySnapshot, build_term

__all__ = [
    "ApiListeningAnalytics",
    "AudioLessonProgressStore",
    "AudiobookProgressStore",
    "BookmarkStore",
    "InMemoryKeyValueStore",
    "InMemoryListeningAnalytics",
    "InMemoryProgressStore",
    "JsonKeyValueStore",
    "LexicalAnnotator",
    "LinguaReadApiClient",
    "SentenceSegmenter",
    "SequencedProgressStore",
    "SubtitleTimeline",
    "VocabularyService",
    "VocabularySnapshot",
    "build_term",
    "find_untracked_words",
    "load_subtitle_file",
    "lookup",
    "parse_srt",
    "progress_from_api",
    "segment",
    "sentence_text",
    "serialize_srt",
    "term_from_api",
    "tokenize",
]
