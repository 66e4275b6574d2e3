from datetime import date, datetime, time, timezone

from flask import Blueprint, request, jsonify, current_app, g

from models import db
from models.child import Child, ChildPost
from models.photo import Photo, POST_TYPES, MULTI_PHOTO
from security.rbac import require_roles
from utils.audit import log_event
from utils.media_urls import apply_media_update, media_payload, normalize_cover_index, parse_url_list
from utils.text import matches_search, parse_hashtags, hashtags_match
from utils.request_data import json_str

photo_bp = Blueprint("photos", __name__)

SORT_ORDERS = {
    "newest": Photo.created_at.desc(),
    "oldest": Photo.created_at.asc(),
    "title_asc": Photo.title.asc(),
    "title_desc": Photo.title.desc(),
}


def _parse_datetime(value: str, end_of_day: bool = False):
    value = (value or "").strip()
    if not value:
        return None
    if len(value) == 10:
        day = date.fromisoformat(value)
        return datetime.combine(day, time.max if end_of_day else time.min)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_date(value):
    if not value:
        return None
    return date.fromisoformat(str(value)[:10])


def photo_to_dict(photo: Photo) -> dict:
    body = {
        "id": photo.id,
        "family_id": photo.family_id,
        "title": photo.title,
        "file_url": photo.file_url,
        "file_type": photo.file_type,
        "type": photo.type or photo.file_type,
        "category": photo.category,
        "hashtags": photo.hashtags or [],
        "custom_date": photo.custom_date.isoformat() if photo.custom_date else None,
        "created_at": photo.created_at.isoformat() if photo.created_at else None,
        "updated_at": photo.updated_at.isoformat() if photo.updated_at else None,
        "child_ids": [link.child_id for link in photo.children],
    }
    body.update(media_payload(photo))
    return body


def _family_photo(photo_id: int):
    photo = db.session.get(Photo, photo_id)
    if photo is None or photo.family_id != g.family.id:
        return None
    return photo


def _family_child_ids(child_ids) -> list:
    """Keeps only ids of children that belong to the current family."""
    if not isinstance(child_ids, list):
        return []
    wanted = {int(c) for c in child_ids if str(c).isdigit()}
    if not wanted:
        return []
    rows = Child.query.filter(Child.family_id == g.family.id, Child.id.in_(wanted)).all()
    return sorted(r.id for r in rows)


def _link_children(photo: Photo, child_ids) -> list:
    existing = {link.child_id for link in photo.children}
    added = []
    for child_id in _family_child_ids(child_ids):
        if child_id in existing:
            continue
        db.session.add(ChildPost(child_id=child_id, photo_id=photo.id))
        added.append(child_id)
    return added


def _check_lengths(title, description):
    max_title = current_app.config.get("MAX_TITLE_LENGTH", 200)
    max_desc = current_app.config.get("MAX_DESCRIPTION_LENGTH", 2000)
    if title and len(title) > max_title:
        return f"Title cannot exceed {max_title} characters"
    if description and len(description) > max_desc:
        return f"Description cannot exceed {max_desc} characters"
    return None


@photo_bp.get("/photos")
@require_roles("viewer")
def list_photos():
    args = request.args
    search = (args.get("search") or "").strip()
    category = (args.get("category") or "").strip()
    hashtag = (args.get("hashtag") or "").strip()
    sort = args.get("sort") or "newest"
    child_id = args.get("childId")

    q = Photo.query.filter(Photo.family_id == g.family.id)

    if category and category != "all":
        q = q.filter(Photo.category == category)

    if args.get("dateStart") and args.get("dateEnd"):
        try:
            start = _parse_datetime(args["dateStart"])
            end = _parse_datetime(args["dateEnd"], end_of_day=True)
        except ValueError:
            return jsonify(error="Invalid date range"), 400
        q = q.filter(Photo.created_at >= start, Photo.created_at <= end)

    if child_id:
        if not child_id.isdigit():
            return jsonify(error="Invalid childId"), 400
        q = q.join(ChildPost, ChildPost.photo_id == Photo.id).filter(ChildPost.child_id == int(child_id))

    q = q.order_by(SORT_ORDERS.get(sort, SORT_ORDERS["newest"]), Photo.id.desc())
    rows = q.all()

    # diacritic-insensitive matching happens in Python
    if search:
        if search.startswith("#"):
            tag = search[1:]
            rows = [p for p in rows if hashtags_match(p.hashtags, tag)]
        else:
            rows = [
                p for p in rows
                if matches_search(p.title, search)
                or matches_search(media_payload(p)["description"], search)
                or hashtags_match(p.hashtags, search)
            ]

    if hashtag:
        rows = [p for p in rows if hashtags_match(p.hashtags, hashtag.lstrip("#"))]

    return jsonify(success=True, photos=[photo_to_dict(p) for p in rows]), 200


@photo_bp.post("/photos")
@require_roles("editor")
def upload_photo():
    data = request.get_json(silent=True) or {}
    title = json_str(data, "title")
    file_url = json_str(data, "fileUrl")
    description = json_str(data, "description")

    if not title or not file_url:
        return jsonify(error="Missing required fields"), 400
    problem = _check_lengths(title, description)
    if problem:
        return jsonify(error=problem), 400

    try:
        custom_date = _parse_date(data.get("customDate"))
    except ValueError:
        return jsonify(error="Invalid customDate"), 400

    photo = Photo(
        family_id=g.family.id,
        title=title,
        description=description,
        file_url=file_url,
        file_type=data.get("fileType") or "image",
        category=json_str(data, "category") or None,
        hashtags=parse_hashtags(data.get("hashtags")) or None,
        custom_date=custom_date,
    )
    db.session.add(photo)
    db.session.commit()

    log_event("PHOTO_UPLOAD", family_id=g.family.id, entity="photo", entity_id=photo.id)
    return jsonify(success=True, photo=photo_to_dict(photo)), 201


@photo_bp.delete("/photos/<int:photo_id>")
@require_roles("editor")
def delete_photo(photo_id: int):
    photo = _family_photo(photo_id)
    if photo is None:
        return jsonify(error="Photo not found"), 404

    db.session.delete(photo)
    db.session.commit()

    log_event("PHOTO_DELETE", family_id=g.family.id, entity="photo", entity_id=photo_id)
    return jsonify(success=True, message="Photo deleted"), 200


@photo_bp.post("/photos/<int:photo_id>/children")
@require_roles("editor")
def associate_children(photo_id: int):
    data = request.get_json(silent=True) or {}
    child_ids = data.get("childIds")
    if not isinstance(child_ids, list) or not child_ids:
        return jsonify(error="childIds must be a non-empty list"), 400

    photo = _family_photo(photo_id)
    if photo is None:
        return jsonify(error="Photo not found"), 404

    added = _link_children(photo, child_ids)
    db.session.commit()
    return jsonify(success=True, added=added, child_ids=[link.child_id for link in photo.children]), 200


@photo_bp.post("/posts")
@require_roles("editor")
def create_post():
    data = request.get_json(silent=True) or {}
    post_type = data.get("type")
    title = json_str(data, "title")
    description = json_str(data, "description")
    file_url = json_str(data, "fileUrl") or None

    if not post_type or (not description and not file_url):
        return jsonify(error="Missing required fields"), 400
    if post_type not in POST_TYPES:
        return jsonify(error="Invalid post type"), 400
    if post_type != "text" and not file_url:
        return jsonify(error="fileUrl is required for media posts"), 400
    problem = _check_lengths(title, description)
    if problem:
        return jsonify(error=problem), 400

    try:
        custom_date = _parse_date(data.get("customDate"))
    except ValueError:
        return jsonify(error="Invalid customDate"), 400

    post = Photo(
        family_id=g.family.id,
        title=title,
        description=description,
        file_url=file_url,
        file_type=post_type,
        type=post_type,
        category=json_str(data, "category") or None,
        hashtags=parse_hashtags(data.get("hashtags")) or None,
        custom_date=custom_date,
    )
    db.session.add(post)
    db.session.flush()
    _link_children(post, data.get("selectedChildren"))
    db.session.commit()

    log_event("POST_CREATE", family_id=g.family.id, entity="photo", entity_id=post.id, metadata={"type": post_type})
    return jsonify(success=True, post=photo_to_dict(post)), 201


@photo_bp.post("/posts/multi")
@require_roles("editor")
def create_multi_photo_post():
    data = request.get_json(silent=True) or {}
    image_urls = data.get("imageUrls")
    title = json_str(data, "title")
    description = json_str(data, "description")

    if not isinstance(image_urls, list) or not image_urls:
        return jsonify(error="At least one image URL is required"), 400
    if not all(isinstance(u, str) and u.strip() for u in image_urls):
        return jsonify(error="Image URLs must be non-empty strings"), 400
    problem = _check_lengths(title, description)
    if problem:
        return jsonify(error=problem), 400

    urls = [u.strip() for u in image_urls]
    cover_index = normalize_cover_index(urls, data.get("coverIndex", 0))

    post = Photo(
        family_id=g.family.id,
        title=title,
        description=description,
        file_url=urls[cover_index],
        file_type="image",
        type=MULTI_PHOTO,
        file_urls=urls,
        cover_index=cover_index,
        category=json_str(data, "category") or None,
        hashtags=parse_hashtags(data.get("hashtags")) or None,
    )
    db.session.add(post)
    db.session.flush()
    _link_children(post, data.get("selectedChildren"))
    db.session.commit()

    log_event("POST_CREATE", family_id=g.family.id, entity="photo", entity_id=post.id,
              metadata={"type": MULTI_PHOTO, "photos": len(urls)})
    return jsonify(success=True, message="Multi-photo post created", post=photo_to_dict(post)), 201


@photo_bp.put("/posts/<int:post_id>")
@require_roles("editor")
def update_post(post_id: int):
    data = request.get_json(silent=True) or {}
    post = _family_photo(post_id)
    if post is None:
        return jsonify(error="Post not found"), 404

    title = data.get("title")
    description = data.get("description")
    if not isinstance(title, (str, type(None))) or not isinstance(description, (str, type(None))):
        return jsonify(error="title and description must be strings"), 400
    problem = _check_lengths(title, description)
    if problem:
        return jsonify(error=problem), 400

    file_urls = data.get("fileUrls", data.get("file_urls"))
    if file_urls is not None and parse_url_list(file_urls) is None:
        return jsonify(error="fileUrls must be a list of non-empty URL strings"), 400

    category = json_str(data, "category") or None
    try:
        custom_date = _parse_date(data.get("customDate"))
    except ValueError:
        return jsonify(error="Invalid customDate"), 400

    # nothing is modified before this point
    if title is not None:
        post.title = title.strip()
    if "hashtags" in data:
        post.hashtags = parse_hashtags(data.get("hashtags")) or None
    if "category" in data:
        post.category = category
    if "customDate" in data:
        post.custom_date = custom_date

    apply_media_update(
        post,
        file_urls=file_urls,
        cover_index=data.get("coverIndex"),
        description=description,
    )
    db.session.commit()

    log_event("POST_UPDATE", family_id=g.family.id, entity="photo", entity_id=post.id)
    return jsonify(success=True, message="Post updated", post=photo_to_dict(post)), 200
