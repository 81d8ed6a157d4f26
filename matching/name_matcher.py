"""Player and team name matching across providers."""
import re
import unicodedata

MIN_SURNAME_LENGTH = 3
MIN_COMMON_WORD_LENGTH = 3
MIN_COMMON_WORDS = 2

# Letters NFD does not decompose into base letter + accent
LETTER_FOLDS = str.maketrans({
    "ø": "o",
    "ł": "l",
    "đ": "d",
    "ð": "d",
    "ħ": "h",
    "ı": "i",
    "ß": "ss",
    "æ": "ae",
    "œ": "oe",
    "þ": "th",
})


def strip_accents(text: str) -> str:
    """Remove accents from unicode characters."""
    return "".join(c for c in unicodedata.normalize("NFD", text)
                   if unicodedata.category(c) != "Mn")


def normalize_name(name: str) -> str:
    """
    Normalize a name for comparison.

    Lowercases, strips diacritics, drops everything that is not a letter or
    whitespace and collapses runs of whitespace. Letters of any script are
    kept, so Cyrillic or CJK spellings compare among themselves.
    """
    if not name:
        return ""
    normalized = strip_accents(name.lower().translate(LETTER_FOLDS))
    normalized = "".join(c for c in normalized if c.isalpha() or c.isspace())
    return re.sub(r"\s+", " ", normalized).strip()


def names_match(name1: str, name2: str) -> bool:
    """
    Decide whether two provider spellings refer to the same player or team.

    Rules, first hit wins:
      1. equal as written, or equal after normalization
      2. same final word (surname) of at least 3 letters
      3. at least 2 shared words longer than 2 letters

    Deliberately permissive: a false positive settles a bet, a false negative
    leaves it pending forever. Empty names never match.
    """
    raw1 = (name1 or "").strip().casefold()
    raw2 = (name2 or "").strip().casefold()
    if not raw1 or not raw2:
        return False
    if raw1 == raw2:
        return True

    norm1 = normalize_name(name1)
    norm2 = normalize_name(name2)
    if not norm1 or not norm2:
        return False

    if norm1 == norm2:
        return True

    parts1 = norm1.split(" ")
    parts2 = norm2.split(" ")

    surname1, surname2 = parts1[-1], parts2[-1]
    if surname1 == surname2 and len(surname1) >= MIN_SURNAME_LENGTH:
        return True

    common = {w for w in parts1 if len(w) >= MIN_COMMON_WORD_LENGTH} & set(parts2)
    return len(common) >= MIN_COMMON_WORDS
