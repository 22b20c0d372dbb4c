"""Anchor names for gemtext headings."""

from __future__ import annotations

import re
import string
import unicodedata
from collections.abc import Iterable

FALLBACK_ANCHOR = "section"

# Hyphens and underscores survive slugging
_PUNCTUATION_TABLE = str.maketrans("", "", string.punctuation.replace("-", "").replace("_", ""))


def slugify(text: str, preserve_unicode: bool = False) -> str:
    """Turn heading text into an anchor name.

    Args:
        text: Heading text.
        preserve_unicode: Keep Unicode characters instead of transliterating
            to ASCII.

    Returns:
        str: Lowercase, hyphen-separated anchor, or ``"section"`` when nothing
            usable remains.

    Examples:
        slugify("Hello World")  # "hello-world"
        slugify("Café", preserve_unicode=True)  # "café"
    """
    if preserve_unicode:
        slug = unicodedata.normalize("NFKC", text)
    else:
        slug = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")

    slug = slug.casefold().translate(_PUNCTUATION_TABLE)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")

    return slug or FALLBACK_ANCHOR


def unique_anchors(titles: Iterable[str], preserve_unicode: bool = False) -> list[str]:
    """Build one distinct anchor per heading title.

    Repeated titles get ``-1``, ``-2``... suffixes. A suffixed anchor that is
    already taken by another title keeps counting, so ``"Part"``, ``"Part"``,
    ``"Part 1"`` yields ``part``, ``part-1``, ``part-1-1``.

    Examples:
        unique_anchors(["Notes", "Notes"])  # ["notes", "notes-1"]
    """
    next_suffix: dict[str, int] = {}
    used: set[str] = set()
    anchors: list[str] = []

    for title in titles:
        base = slugify(title, preserve_unicode=preserve_unicode)
        count = next_suffix.get(base, 0)
        anchor = base if count == 0 else f"{base}-{count}"
        while anchor in used:
            count += 1
            anchor = f"{base}-{count}"

        next_suffix[base] = count + 1
        used.add(anchor)
        anchors.append(anchor)

    return anchors
