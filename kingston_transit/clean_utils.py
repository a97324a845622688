"""Shared text cleanup rules for agency head-signs and stop names.

Every public function is a pure ``str -> str`` transformation and every
public pattern is compiled once at import time. Agency adapters compose
these rules in a fixed order; later rules assume earlier ones already ran,
so a rule only has to recognize the canonical output of its predecessors.

Word patterns built by ``clean_words`` capture the separator preceding the
word as group 1 and only look ahead at the following separator, so that
adjacent matches ("at and at") are all replaced in a single pass.
"""

from __future__ import annotations

import re
from typing import Final

# ---------------------------------------------------------------------------
# Word pattern builders
# ---------------------------------------------------------------------------


def clean_words(*words: str) -> re.Pattern[str]:
    """Compile a case-insensitive whole-word pattern matching any of words.

    Longer alternatives are tried first so that a phrase never loses to one
    of its own prefixes.
    """
    if not words:
        raise ValueError("clean_words() requires at least one word")
    alternation = "|".join(
        re.escape(word) for word in sorted(words, key=len, reverse=True)
    )
    return re.compile(rf"(^|\W)({alternation})(?=\W|$)", re.IGNORECASE)


def clean_word(word: str) -> re.Pattern[str]:
    """Compile a case-insensitive whole-word pattern for a single word."""
    return clean_words(word)


def clean_words_replacement(replacement: str) -> str:
    """Build the substitution template matching a ``clean_words`` pattern."""
    return r"\g<1>" + replacement.replace("\\", "\\\\")


# ---------------------------------------------------------------------------
# Connectors
# ---------------------------------------------------------------------------

CLEAN_AT: Final[re.Pattern[str]] = clean_word("at")
CLEAN_AT_REPLACEMENT: Final[str] = clean_words_replacement("/")

CLEAN_AND: Final[re.Pattern[str]] = clean_word("and")
CLEAN_AND_REPLACEMENT: Final[str] = clean_words_replacement("&")

_VIA: Final[re.Pattern[str]] = re.compile(r"\s+via(\s.*)?$", re.IGNORECASE)


def keep_to_and_remove_via(text: str) -> str:
    """Collapse "A to B via C" into "A to B"."""
    return _VIA.sub("", text)


# ---------------------------------------------------------------------------
# Saint names
# A "St" token is a saint when it opens a name segment (start of text, or
# right after a connector) and is followed by a capitalized word that is
# not a compass direction. Everywhere else "St" is a street type.
# ---------------------------------------------------------------------------

_COMPASS: Final[str] = r"(?:north|south|east|west|n|s|e|w)\b"

SAINT: Final[re.Pattern[str]] = re.compile(
    r"(?P<lead>^|[&@/(,-]\s*|\b(?i:to)\s+)"
    r"(?P<st>(?i:st)\b\.?)"
    rf"(?=\s+(?!(?i:{_COMPASS}))[A-Z])"
)
SAINT_REPLACEMENT: Final[str] = r"\g<lead>Saint"


# ---------------------------------------------------------------------------
# Slashes
# ---------------------------------------------------------------------------

_SLASH: Final[re.Pattern[str]] = re.compile(r"\s*/\s*")


def clean_slashes(text: str) -> str:
    """Rewrite slash-separated alternatives as "A / B"."""
    return _SLASH.sub(" / ", text)


# ---------------------------------------------------------------------------
# Street types (abbreviation -> full word)
# ---------------------------------------------------------------------------

_STREET_TYPES: Final[dict[str, str]] = {
    "ave": "Avenue",
    "av": "Avenue",
    "blvd": "Boulevard",
    "cir": "Circle",
    "cres": "Crescent",
    "ct": "Court",
    "dr": "Drive",
    "gdns": "Gardens",
    "hts": "Heights",
    "hwy": "Highway",
    "ln": "Lane",
    "pk": "Park",
    "pkwy": "Parkway",
    "pl": "Place",
    "rd": "Road",
    "sq": "Square",
    "st": "Street",
    "terr": "Terrace",
}

_STREET_TYPE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b(?P<abbr>"
    + "|".join(sorted(_STREET_TYPES, key=len, reverse=True))
    + r")\b\.?",
    re.IGNORECASE,
)


def clean_street_types(text: str) -> str:
    """Expand street-type abbreviations, leaving saint-position "St" alone."""
    saint_positions = {match.start("st") for match in SAINT.finditer(text)}

    def _expand(match: re.Match[str]) -> str:
        if match.start() in saint_positions:
            return match.group(0)
        return _STREET_TYPES[match.group("abbr").lower()]

    return _STREET_TYPE_PATTERN.sub(_expand, text)


# ---------------------------------------------------------------------------
# Boundaries
# ---------------------------------------------------------------------------

_OPEN_BRACKETS: Final[re.Pattern[str]] = re.compile(r"[\[{]")
_CLOSE_BRACKETS: Final[re.Pattern[str]] = re.compile(r"[\]}]")
_EMPTY_PARENTHESES: Final[re.Pattern[str]] = re.compile(r"\(\s*\)")
_LEADING_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"^[\s\-/,;:.]+")
_TRAILING_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"[\s\-/,;:.]+$")


def clean_bounds(text: str) -> str:
    """Normalize enclosing brackets and strip separators at both ends."""
    text = _OPEN_BRACKETS.sub("(", text)
    text = _CLOSE_BRACKETS.sub(")", text)
    text = _EMPTY_PARENTHESES.sub("", text)
    text = _LEADING_SEPARATORS.sub("", text)
    return _TRAILING_SEPARATORS.sub("", text)


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_ORDINAL_WORDS: Final[dict[str, str]] = {
    "first": "1st",
    "second": "2nd",
    "third": "3rd",
    "fourth": "4th",
    "fifth": "5th",
    "sixth": "6th",
    "seventh": "7th",
    "eighth": "8th",
    "ninth": "9th",
    "tenth": "10th",
}

_ORDINAL_WORD_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b(" + "|".join(_ORDINAL_WORDS) + r")\b",
    re.IGNORECASE,
)
_ORDINAL_SUFFIX_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b(\d+)(st|nd|rd|th)\b",
    re.IGNORECASE,
)


def clean_numbers(text: str) -> str:
    """Write ordinals as digits with a lower-case suffix ("Second" -> "2nd")."""
    text = _ORDINAL_WORD_PATTERN.sub(
        lambda m: _ORDINAL_WORDS[m.group(1).lower()], text
    )
    return _ORDINAL_SUFFIX_PATTERN.sub(
        lambda m: m.group(1) + m.group(2).lower(), text
    )


# ---------------------------------------------------------------------------
# Generic label cleanup
# ---------------------------------------------------------------------------

# All-caps tokens that stay upper-case in rider-facing labels
_ACRONYMS: Final[frozenset[str]] = frozenset({"HDH", "KGH", "RMC", "SLC"})

_SPACES: Final[re.Pattern[str]] = re.compile(r"\s+")
_SPACE_AFTER_OPEN: Final[re.Pattern[str]] = re.compile(r"\(\s+")
_SPACE_BEFORE_CLOSE: Final[re.Pattern[str]] = re.compile(r"\s+\)")
_SPACE_BEFORE_COMMA: Final[re.Pattern[str]] = re.compile(r"\s+,")
_LABEL_LEADING: Final[re.Pattern[str]] = re.compile(r"^[\s\-/,;:]+")
_LABEL_TRAILING: Final[re.Pattern[str]] = re.compile(r"[\s\-/,;:]+$")
_UPPER_WORD: Final[re.Pattern[str]] = re.compile(r"\b[A-Z][A-Z']*[A-Z]\b")


def _title_upper_word(match: re.Match[str]) -> str:
    word = match.group(0)
    letters = word.replace("'", "")
    if len(letters) < 3 or word in _ACRONYMS:
        return word
    return word.capitalize()


def clean_label(text: str) -> str:
    """Apply the final whitespace, punctuation and casing cleanup."""
    text = _SPACES.sub(" ", text)
    text = _SPACE_AFTER_OPEN.sub("(", text)
    text = _SPACE_BEFORE_CLOSE.sub(")", text)
    text = _SPACE_BEFORE_COMMA.sub(",", text)
    text = _LABEL_LEADING.sub("", text)
    text = _LABEL_TRAILING.sub("", text)
    text = _UPPER_WORD.sub(_title_upper_word, text)
    if text and text[0].islower():
        text = text[0].upper() + text[1:]
    return text
