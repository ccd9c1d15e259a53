"""Text helpers for bounding the size of logged content."""

DEFAULT_PREVIEW_LENGTH = 200
ELLIPSIS = "..."


def preview_text(text: str, max_length: int = DEFAULT_PREVIEW_LENGTH, suffix: str = ELLIPSIS) -> str:
    """Cut text to its first ``max_length`` characters, marking the cut.

    Unlike a word-aware truncation, the cut is exact so the preview length is
    predictable: never more than ``max_length + len(suffix)`` characters.

    Example:
        >>> preview_text("abcdef", max_length=3)
        'abc...'
        >>> preview_text("abc", max_length=3)
        'abc'
    """
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length] + suffix
