"""Text processing utilities."""

import re

_PARAGRAPH_BREAK = re.compile(r"(?:\r?\n[ \t]*){2,}")


def clean_subtitle_text(text: str) -> str:
    """Remove formatting tags and clean up subtitle text.

    Args:
        text: Raw subtitle text with possible formatting tags

    Returns:
        Cleaned text without formatting tags
    """
    # Remove ASS/SSA style tags like {\pos(x,y)}, {\fad(100,200)}, etc.
    text = re.sub(r"\{[^}]*\}", "", text)

    # Remove line break tags
    text = re.sub(r"\\[nN]", " ", text)

    # Remove HTML tags if present
    text = re.sub(r"<[^>]+>", "", text)

    # Normalize whitespace
    text = " ".join(text.split())

    return text.strip()


def parse_substitutions(value: str) -> tuple[tuple[str, str], ...]:
    """Parse a ``"from=to|from=to"`` character substitution list.

    Malformed pairs (no ``=`` or empty source) are ignored.

    Args:
        value: Substitution list as stored in the language settings

    Returns:
        Tuple of (source, replacement) pairs in declaration order
    """
    pairs = []
    for item in value.split("|"):
        if "=" not in item:
            continue
        source, replacement = item.split("=", 1)
        if source:
            pairs.append((source, replacement))
    return tuple(pairs)


def normalize_term(text: str, substitutions: tuple[tuple[str, str], ...] = ()) -> str:
    """Derive the lookup key for a word or phrase.

    Applies character substitutions, lowercases, and collapses internal
    whitespace to single spaces. This is the only place a term key is built.

    Args:
        text: Term as it appears in text or as the user typed it
        substitutions: Parsed substitution pairs

    Returns:
        Normalized lowercase key
    """
    for source, replacement in substitutions:
        text = text.replace(source, replacement)
    return " ".join(text.lower().split())


def split_paragraphs(text: str) -> list[str]:
    """Split body text into paragraphs on runs of blank lines.

    Whitespace-only paragraphs are dropped.

    Args:
        text: Full body text

    Returns:
        List of paragraph strings in order
    """
    return [p for p in _PARAGRAPH_BREAK.split(text) if p.strip()]

