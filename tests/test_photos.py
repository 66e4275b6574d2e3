"""
Tests for photos and posts.
============================
Covers:
  - Role checks on reads and writes
  - Upload, post and multi-photo creation rules
  - Search, hashtag, category, date and child filters
  - Editing posts without losing their photo set, legacy rows included
"""
from datetime import datetime

from models import db
from models.photo import Photo, MULTI_PHOTO
from utils.media_urls import encode_legacy_description

URLS = ["https://cdn.example/a.jpg", "https://cdn.example/b.jpg", "https://cdn.example/c.jpg"]


def _upload(client, hdrs, **overrides):
    payload = {"title": "Ziua de naștere", "fileUrl": "https://cdn.example/p.jpg"}
    payload.update(overrides)
    return client.post("/photos", json=payload, headers=hdrs)


def _titles(client, hdrs, **params):
    resp = client.get("/photos", query_string=params, headers=hdrs)
    assert resp.status_code == 200, resp.get_json()
    return [p["title"] for p in resp.get_json()["photos"]]


def _add_child(client, hdrs, name="Ana"):
    return client.post("/children", json={"name": name}, headers=hdrs).get_json()["child"]["id"]


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------

class TestAccess:
    def test_list_requires_login(self, client):
        resp = client.get("/photos")
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "UNAUTHORIZED"

    def test_viewer_cannot_upload(self, client, viewer_headers):
        resp = _upload(client, viewer_headers)
        assert resp.status_code == 403
        assert resp.get_json()["code"] == "FORBIDDEN"

    def test_admin_is_not_a_family_member(self, client, admin_headers):
        assert client.get("/photos", headers=admin_headers).status_code == 403

    def test_families_only_see_their_own_photos(self, client, editor_headers, other_editor_headers):
        _upload(client, editor_headers, title="Popescu photo")
        _upload(client, other_editor_headers, title="Ionescu photo")

        assert _titles(client, editor_headers) == ["Popescu photo"]
        assert _titles(client, other_editor_headers) == ["Ionescu photo"]


# ---------------------------------------------------------------------------
# Creating
# ---------------------------------------------------------------------------

class TestUpload:
    def test_editor_uploads(self, client, editor_headers, viewer_headers):
        resp = _upload(client, editor_headers, hashtags="#familie #vara", category="memories",
                       customDate="2024-07-01")
        assert resp.status_code == 201

        photo = resp.get_json()["photo"]
        assert photo["file_url"] == "https://cdn.example/p.jpg"
        assert photo["hashtags"] == ["familie", "vara"]
        assert photo["category"] == "memories"
        assert photo["custom_date"] == "2024-07-01"

        assert _titles(client, viewer_headers) == ["Ziua de naștere"]

    def test_missing_fields(self, client, editor_headers):
        assert _upload(client, editor_headers, title="").status_code == 400
        assert _upload(client, editor_headers, fileUrl="").status_code == 400

    def test_title_too_long(self, client, editor_headers):
        resp = _upload(client, editor_headers, title="x" * 201)
        assert resp.status_code == 400
        assert "200" in resp.get_json()["error"]

    def test_non_string_fields(self, client, editor_headers):
        resp = _upload(client, editor_headers, title=5)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "title must be a string"

        assert _upload(client, editor_headers, fileUrl={"url": "x"}).status_code == 400
        assert _upload(client, editor_headers, category=3).status_code == 400

        resp = client.post("/posts", json={"type": "text", "description": ["a"]}, headers=editor_headers)
        assert resp.status_code == 400

    def test_bad_custom_date(self, client, editor_headers):
        assert _upload(client, editor_headers, customDate="yesterday").status_code == 400

    def test_upload_is_audited(self, client, editor_headers):
        from models.audit_log import AuditLog
        _upload(client, editor_headers)
        assert AuditLog.query.filter_by(action="PHOTO_UPLOAD").count() == 1


class TestPosts:
    def test_text_post(self, client, editor_headers):
        resp = client.post("/posts", json={"type": "text", "title": "Gând", "description": "O zi frumoasă"},
                           headers=editor_headers)
        assert resp.status_code == 201
        post = resp.get_json()["post"]
        assert post["type"] == "text"
        assert post["file_url"] is None
        assert post["description"] == "O zi frumoasă"

    def test_media_post_needs_file(self, client, editor_headers):
        resp = client.post("/posts", json={"type": "video", "description": "no file"}, headers=editor_headers)
        assert resp.status_code == 400

    def test_unknown_type(self, client, editor_headers):
        resp = client.post("/posts", json={"type": "audio", "fileUrl": "x.mp3"}, headers=editor_headers)
        assert resp.status_code == 400

    def test_needs_content(self, client, editor_headers):
        assert client.post("/posts", json={"type": "text"}, headers=editor_headers).status_code == 400

    def test_description_too_long(self, client, editor_headers):
        resp = client.post("/posts", json={"type": "text", "description": "x" * 2001}, headers=editor_headers)
        assert resp.status_code == 400

    def test_selected_children_are_linked(self, client, editor_headers, other_editor_headers):
        mine = _add_child(client, editor_headers)
        theirs = _add_child(client, other_editor_headers, name="Ion")

        resp = client.post(
            "/posts",
            json={"type": "image", "fileUrl": "x.jpg", "selectedChildren": [mine, theirs]},
            headers=editor_headers,
        )
        assert resp.get_json()["post"]["child_ids"] == [mine]


class TestMultiPhoto:
    def test_create(self, client, editor_headers):
        resp = client.post("/posts/multi", json={"imageUrls": URLS, "coverIndex": 1, "title": "Excursie"},
                           headers=editor_headers)
        assert resp.status_code == 201

        post = resp.get_json()["post"]
        assert post["type"] == MULTI_PHOTO
        assert post["file_urls"] == URLS
        assert post["cover_index"] == 1
        assert post["file_url"] == URLS[1]
        assert post["ordered_file_urls"] == [URLS[1], URLS[0], URLS[2]]

    def test_cover_index_is_clamped(self, client, editor_headers):
        post = client.post("/posts/multi", json={"imageUrls": URLS, "coverIndex": 10},
                           headers=editor_headers).get_json()["post"]
        assert post["cover_index"] == 2

    def test_needs_urls(self, client, editor_headers):
        assert client.post("/posts/multi", json={"imageUrls": []}, headers=editor_headers).status_code == 400
        assert client.post("/posts/multi", json={"imageUrls": ["a", ""]}, headers=editor_headers).status_code == 400


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListing:
    def test_search_ignores_diacritics(self, client, editor_headers):
        _upload(client, editor_headers, title="Excursie la Brașov")
        _upload(client, editor_headers, title="Acasă")

        assert _titles(client, editor_headers, search="brasov") == ["Excursie la Brașov"]

    def test_search_matches_description_and_hashtags(self, client, editor_headers):
        _upload(client, editor_headers, title="Unu", description="La bunica")
        _upload(client, editor_headers, title="Doi", hashtags="#bunica")
        _upload(client, editor_headers, title="Trei")

        assert sorted(_titles(client, editor_headers, search="bunica")) == ["Doi", "Unu"]

    def test_hash_search_only_looks_at_hashtags(self, client, editor_headers):
        _upload(client, editor_headers, title="Plaja", hashtags="#mare")
        _upload(client, editor_headers, title="Marea Neagră")

        assert _titles(client, editor_headers, search="#mare") == ["Plaja"]

    def test_hashtag_filter(self, client, editor_headers):
        _upload(client, editor_headers, title="Plaja", hashtags="#mare")
        _upload(client, editor_headers, title="Munte", hashtags="#munte")

        assert _titles(client, editor_headers, hashtag="#munte") == ["Munte"]

    def test_category_filter(self, client, editor_headers):
        _upload(client, editor_headers, title="A", category="play")
        _upload(client, editor_headers, title="B", category="learning")

        assert _titles(client, editor_headers, category="play") == ["A"]
        assert len(_titles(client, editor_headers, category="all")) == 2

    def test_sort_by_title(self, client, editor_headers):
        for title in ("Beta", "Alfa", "Gama"):
            _upload(client, editor_headers, title=title)

        assert _titles(client, editor_headers, sort="title_asc") == ["Alfa", "Beta", "Gama"]
        assert _titles(client, editor_headers, sort="title_desc") == ["Gama", "Beta", "Alfa"]

    def test_date_range_includes_the_whole_end_day(self, client, editor_headers):
        _upload(client, editor_headers, title="Azi")
        today = datetime.utcnow().date().isoformat()

        assert _titles(client, editor_headers, dateStart=today, dateEnd=today) == ["Azi"]
        assert _titles(client, editor_headers, dateStart="2000-01-01", dateEnd="2000-01-02") == []

    def test_invalid_date_range(self, client, editor_headers):
        resp = client.get("/photos", query_string={"dateStart": "x", "dateEnd": "y"}, headers=editor_headers)
        assert resp.status_code == 400

    def test_child_filter(self, client, editor_headers):
        child_id = _add_child(client, editor_headers)
        photo_id = _upload(client, editor_headers, title="Cu Ana").get_json()["photo"]["id"]
        _upload(client, editor_headers, title="Fără copii")

        resp = client.post(f"/photos/{photo_id}/children", json={"childIds": [child_id]}, headers=editor_headers)
        assert resp.status_code == 200
        assert resp.get_json()["child_ids"] == [child_id]

        assert _titles(client, editor_headers, childId=child_id) == ["Cu Ana"]

    def test_associate_needs_ids(self, client, editor_headers):
        photo_id = _upload(client, editor_headers).get_json()["photo"]["id"]
        resp = client.post(f"/photos/{photo_id}/children", json={"childIds": []}, headers=editor_headers)
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Editing and deleting
# ---------------------------------------------------------------------------

class TestUpdate:
    def test_edit_description_keeps_photos(self, client, editor_headers):
        post_id = client.post("/posts/multi", json={"imageUrls": URLS, "coverIndex": 2},
                              headers=editor_headers).get_json()["post"]["id"]

        resp = client.put(f"/posts/{post_id}", json={"description": "Altă descriere"}, headers=editor_headers)
        assert resp.status_code == 200

        post = resp.get_json()["post"]
        assert post["description"] == "Altă descriere"
        assert post["file_urls"] == URLS
        assert post["cover_index"] == 2

    def test_legacy_post_is_migrated_on_edit(self, client, editor_headers, family_id):
        legacy = Photo(
            family_id=family_id,
            title="Vechi",
            description=encode_legacy_description("Text vechi", URLS, 1),
            file_url=URLS[1],
            file_type="image",
            type=MULTI_PHOTO,
        )
        db.session.add(legacy)
        db.session.commit()

        listed = client.get("/photos", headers=editor_headers).get_json()["photos"][0]
        assert listed["file_urls"] == URLS
        assert listed["description"] == "Text vechi"

        resp = client.put(f"/posts/{legacy.id}", json={"title": "Nou"}, headers=editor_headers)
        post = resp.get_json()["post"]
        assert post["title"] == "Nou"
        assert post["file_urls"] == URLS
        assert post["cover_index"] == 1

        row = db.session.get(Photo, legacy.id)
        assert row.file_urls == URLS
        assert row.description == "Text vechi"

    def test_replace_photo_set(self, client, editor_headers):
        post_id = client.post("/posts/multi", json={"imageUrls": URLS},
                              headers=editor_headers).get_json()["post"]["id"]

        post = client.put(f"/posts/{post_id}", json={"fileUrls": ["n1.jpg", "n2.jpg"], "coverIndex": 1},
                          headers=editor_headers).get_json()["post"]
        assert post["file_urls"] == ["n1.jpg", "n2.jpg"]
        assert post["file_url"] == "n2.jpg"

    def test_malformed_file_urls_keep_the_photo_set(self, client, editor_headers):
        post_id = client.post("/posts/multi", json={"imageUrls": URLS, "coverIndex": 1},
                              headers=editor_headers).get_json()["post"]["id"]

        for bad in ("https://cdn.example/z.jpg", [1, 2], ["ok.jpg", ""], '["ok.jpg", 3]'):
            resp = client.put(f"/posts/{post_id}", json={"fileUrls": bad, "title": "Changed"},
                              headers=editor_headers)
            assert resp.status_code == 400, bad

        row = db.session.get(Photo, post_id)
        assert row.file_urls == URLS
        assert row.file_url == URLS[1]
        assert row.type == MULTI_PHOTO
        assert row.title != "Changed"

    def test_json_string_file_urls(self, client, editor_headers):
        post_id = client.post("/posts/multi", json={"imageUrls": URLS},
                              headers=editor_headers).get_json()["post"]["id"]
        post = client.put(f"/posts/{post_id}", json={"file_urls": '["n1.jpg", "n2.jpg"]'},
                          headers=editor_headers).get_json()["post"]
        assert post["file_urls"] == ["n1.jpg", "n2.jpg"]
        assert post["file_url"] == "n1.jpg"

    def test_emptying_the_set_clears_the_cover(self, client, editor_headers):
        post_id = client.post("/posts/multi", json={"imageUrls": URLS, "coverIndex": 2},
                              headers=editor_headers).get_json()["post"]["id"]

        resp = client.put(f"/posts/{post_id}", json={"fileUrls": []}, headers=editor_headers)
        assert resp.status_code == 200

        row = db.session.get(Photo, post_id)
        assert row.file_urls == []
        assert row.file_url is None
        assert row.cover_index is None
        assert row.type == "image"

    def test_bad_category_changes_nothing(self, client, editor_headers):
        photo_id = _upload(client, editor_headers, category="play").get_json()["photo"]["id"]
        resp = client.put(f"/posts/{photo_id}", json={"title": "Nou", "category": ["x"]}, headers=editor_headers)
        assert resp.status_code == 400

        row = db.session.get(Photo, photo_id)
        assert row.title == "Ziua de naștere"
        assert row.category == "play"

    def test_update_hashtags_and_category(self, client, editor_headers):
        photo_id = _upload(client, editor_headers).get_json()["photo"]["id"]
        post = client.put(f"/posts/{photo_id}", json={"hashtags": ["Mare"], "category": "special"},
                          headers=editor_headers).get_json()["post"]
        assert post["hashtags"] == ["mare"]
        assert post["category"] == "special"

    def test_wrong_types(self, client, editor_headers):
        photo_id = _upload(client, editor_headers).get_json()["photo"]["id"]
        assert client.put(f"/posts/{photo_id}", json={"title": 5}, headers=editor_headers).status_code == 400
        assert client.put(f"/posts/{photo_id}", json={"fileUrls": 3}, headers=editor_headers).status_code == 400

    def test_other_familys_post(self, client, editor_headers, other_editor_headers):
        photo_id = _upload(client, other_editor_headers).get_json()["photo"]["id"]
        assert client.put(f"/posts/{photo_id}", json={"title": "x"}, headers=editor_headers).status_code == 404


class TestDelete:
    def test_delete(self, client, editor_headers):
        photo_id = _upload(client, editor_headers).get_json()["photo"]["id"]

        assert client.delete(f"/photos/{photo_id}", headers=editor_headers).status_code == 200
        assert client.delete(f"/photos/{photo_id}", headers=editor_headers).status_code == 404
        assert _titles(client, editor_headers) == []

    def test_viewer_cannot_delete(self, client, editor_headers, viewer_headers):
        photo_id = _upload(client, editor_headers).get_json()["photo"]["id"]
        assert client.delete(f"/photos/{photo_id}", headers=viewer_headers).status_code == 403
