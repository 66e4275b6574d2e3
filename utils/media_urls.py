"""
Multi-photo posts store an ordered URL list plus a cover index.

Three storage formats exist in the photos table:
  1. file_urls holds a JSON list (current writer)
  2. file_urls holds a JSON-encoded string (older clients)
  3. the description carries "__MULTI_PHOTO_URLS__:<json>" and
     "__COVER_INDEX__:<n>" markers (rows written before the columns existed)
Readers accept all three; writers always use format 1.
"""
import json
import re

from models.photo import MULTI_PHOTO

URLS_MARKER = "__MULTI_PHOTO_URLS__:"
COVER_MARKER = "__COVER_INDEX__:"

_COVER_RE = re.compile(r"__COVER_INDEX__:(\d+)")


def _as_url_list(value):
    if isinstance(value, list):
        return [u for u in value if isinstance(u, str) and u]
    if isinstance(value, str) and value:
        try:
            decoded = json.loads(value)
        except ValueError:
            return None
        if isinstance(decoded, list):
            return [u for u in decoded if isinstance(u, str) and u]
    return None


def parse_url_list(value):
    """
    Strict reader for client input: a list, or a JSON list string, of
    non-empty URL strings. Returns None for anything else.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, list):
        return None
    urls = [u.strip() if isinstance(u, str) else None for u in value]
    if not all(urls):
        return None
    return urls


def _legacy_urls(description):
    if not description or URLS_MARKER not in description:
        return None
    payload = description[description.index(URLS_MARKER) + len(URLS_MARKER):]
    # a cover marker may follow the JSON on its own line
    payload = _COVER_RE.sub("", payload).strip()
    try:
        decoded = json.loads(payload)
    except ValueError:
        return None
    return _as_url_list(decoded)


def extract_urls(post):
    urls = _as_url_list(getattr(post, "file_urls", None))
    if urls is not None:
        return urls
    return _legacy_urls(getattr(post, "description", None))


def extract_cover_index(post) -> int:
    cover = getattr(post, "cover_index", None)
    if cover is not None:
        return int(cover)
    match = _COVER_RE.search(getattr(post, "description", None) or "")
    return int(match.group(1)) if match else 0


def clean_description(description) -> str:
    if not description:
        return ""
    if URLS_MARKER in description:
        description = description[:description.index(URLS_MARKER)]
    return _COVER_RE.sub("", description).strip()


def encode_legacy_description(description, urls, cover_index=None) -> str:
    text = (description or "") + "\n" + URLS_MARKER + json.dumps(urls)
    if cover_index is not None:
        text += "\n" + COVER_MARKER + str(int(cover_index))
    return text


def normalize_cover_index(urls, index) -> int:
    if not urls:
        return 0
    try:
        index = int(index)
    except (TypeError, ValueError):
        return 0
    return min(max(index, 0), len(urls) - 1)


def reorder_with_cover(urls, cover_index):
    """Cover URL first, the rest keep their relative order."""
    if not urls:
        return []
    cover_index = normalize_cover_index(urls, cover_index)
    return [urls[cover_index]] + urls[:cover_index] + urls[cover_index + 1:]


def apply_media_update(post, file_urls=None, cover_index=None, description=None):
    """
    Applies an edit to a post's media without losing its photo set.

    Explicit file_urls replace the set. Otherwise the existing set, from the
    column or from a legacy description, is kept and migrated to the column.
    A description given by the caller replaces the text part only.
    """
    existing = extract_urls(post)
    new_text = clean_description(post.description) if description is None else clean_description(description)

    if file_urls is not None:
        urls = parse_url_list(file_urls)
        if urls is None:
            raise ValueError("file_urls must be a list of non-empty URL strings")
    else:
        urls = existing

    if urls is None:
        post.description = new_text
        return post

    if cover_index is None:
        cover_index = extract_cover_index(post)
    cover_index = normalize_cover_index(urls, cover_index)

    post.file_urls = urls
    post.cover_index = cover_index
    post.description = new_text
    if urls:
        post.file_url = urls[cover_index]
        if len(urls) > 1:
            post.type = MULTI_PHOTO
    else:
        # set explicitly emptied
        post.file_url = None
        post.cover_index = None
        if post.type == MULTI_PHOTO:
            post.type = post.file_type
    return post


def media_payload(post) -> dict:
    urls = extract_urls(post)
    cover = normalize_cover_index(urls, extract_cover_index(post)) if urls else None
    return {
        "file_urls": urls,
        "cover_index": cover,
        "ordered_file_urls": reorder_with_cover(urls, cover) if urls else None,
        "description": clean_description(post.description),
    }
