"""Immutable vocabulary snapshot consumed by the lexical annotator."""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from lingua_reader.models import UNTRACKED_STATUS, VocabularyTerm
from lingua_reader.utils import normalize_term


def build_term(
    display_term: str,
    status: int,
    translation: str | None = None,
    term_id: int | None = None,
    substitutions: tuple[tuple[str, str], ...] = (),
) -> VocabularyTerm:
    """Create a VocabularyTerm with its key and phrase flag derived from the text.

    Args:
        display_term: Term as typed or selected by the user
        status: Learning status (0-5)
        translation: Optional translation
        term_id: Backend identifier if already persisted
        substitutions: Language character substitutions for the key

    Returns:
        New VocabularyTerm
    """
    display_term = display_term.strip()
    return VocabularyTerm(
        term_key=normalize_term(display_term, substitutions),
        display_term=display_term,
        status=status,
        translation=translation,
        is_phrase=any(ch.isspace() for ch in display_term),
        term_id=term_id,
    )


class VocabularySnapshot:
    """Read-only view of a user's vocabulary for one render pass.

    Snapshots are never mutated. Updates produce a new snapshot, so a
    tokenization pass holding a reference always sees one consistent set.
    """

    def __init__(self, terms: Iterable[VocabularyTerm] = ()):
        words: dict[str, VocabularyTerm] = {}
        phrases: dict[str, VocabularyTerm] = {}
        for term in terms:
            target = phrases if term.is_phrase else words
            target[term.term_key] = term

        self._words = MappingProxyType(words)
        self._phrase_map = MappingProxyType(phrases)

        # Longest first, then lexical, so equal-length matches resolve deterministically
        ordered = sorted(phrases.values(), key=lambda t: (-len(t.display_term), t.term_key))
        by_initial: dict[str, list[tuple[str, VocabularyTerm]]] = {}
        for term in ordered:
            lowered = term.display_term.lower()
            if lowered:
                by_initial.setdefault(lowered[0], []).append((lowered, term))
        self._phrases = tuple(ordered)
        self._phrases_by_initial = MappingProxyType(
            {initial: tuple(items) for initial, items in by_initial.items()}
        )

    @classmethod
    def coerce(
        cls, vocabulary: "VocabularySnapshot | Iterable[VocabularyTerm] | None"
    ) -> "VocabularySnapshot":
        """Accept either a snapshot or a plain list of terms."""
        if isinstance(vocabulary, cls):
            return vocabulary
        return cls(vocabulary or ())

    def __len__(self) -> int:
        return len(self._words) + len(self._phrase_map)

    def __iter__(self) -> Iterator[VocabularyTerm]:
        yield from self._words.values()
        yield from self._phrase_map.values()

    def __contains__(self, term_key: object) -> bool:
        return term_key in self._words or term_key in self._phrase_map

    @property
    def phrases(self) -> tuple[VocabularyTerm, ...]:
        """Phrase terms ordered by length descending, then key ascending."""
        return self._phrases

    def get(self, term_key: str) -> VocabularyTerm | None:
        """Look up a word or phrase by its normalized key."""
        return self._words.get(term_key) or self._phrase_map.get(term_key)

    def word_status(self, term_key: str) -> int:
        """Status of a single word, 0 when untracked."""
        term = self._words.get(term_key)
        return term.status if term else UNTRACKED_STATUS

    def phrase_candidates(self, initial: str) -> tuple[tuple[str, VocabularyTerm], ...]:
        """Phrases whose lowercased text starts with ``initial``, in match order."""
        return self._phrases_by_initial.get(initial, ())

    def with_term(self, term: VocabularyTerm) -> "VocabularySnapshot":
        """Return a new snapshot with ``term`` added or replaced."""
        terms = {t.term_key: t for t in self}
        terms[term.term_key] = term
        return VocabularySnapshot(terms.values())

    def with_terms(self, updates: Iterable[VocabularyTerm]) -> "VocabularySnapshot":
        """Return a new snapshot with several terms added or replaced."""
        terms = {t.term_key: t for t in self}
        for term in updates:
            terms[term.term_key] = term
        return VocabularySnapshot(terms.values())
