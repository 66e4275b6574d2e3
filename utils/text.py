import unicodedata

# Romanian letters that survive NFD decomposition in some encodings (comma vs cedilla)
_FOLD = str.maketrans({
    "ș": "s", "ş": "s",
    "ț": "t", "ţ": "t",
    "ă": "a", "â": "a",
    "î": "i",
})


def normalize_text(text) -> str:
    """Lower-case, strip diacritics and surrounding whitespace."""
    if not text or not isinstance(text, str):
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.translate(_FOLD).strip()


def matches_search(content, term) -> bool:
    if not content or not term:
        return False
    return normalize_text(term) in normalize_text(content)


def parse_hashtags(value) -> list:
    """
    "#Beach  #summer word" -> ["beach", "summer"].
    Lists are accepted too; there the leading "#" is optional.
    """
    if not value:
        return []

    if isinstance(value, str):
        tokens = [t for t in value.split() if t.startswith("#")]
    elif isinstance(value, (list, tuple)):
        tokens = [t for t in value if isinstance(t, str)]
    else:
        return []

    tags = []
    for token in tokens:
        tag = token.strip().lower().replace("#", "", 1)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def hashtags_match(hashtags, term) -> bool:
    if not isinstance(hashtags, list):
        return False
    return any(matches_search(tag, term) for tag in hashtags)
