"""
News API tests: envelope shape, lifecycle endpoints and auth guards.
"""

API = "/api/v1"


def create_news(client, headers, **overrides):
    body = {"title": "IHSG Closes Higher", "content": "The index gained 1.2%.", "tags": ["IHSG"]}
    body.update(overrides)
    resp = client.post(f"{API}/news", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def publish(client, news_id, author_headers, editor_headers):
    assert client.post(f"{API}/news/{news_id}/submit", headers=author_headers).status_code == 200
    resp = client.post(f"{API}/news/{news_id}/publish", headers=editor_headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "ok"


def test_create_returns_envelope(client, author_headers):
    resp = client.post(
        f"{API}/news",
        json={"title": "BI Holds Rate", "content": "Unchanged at 6%.", "excerpt": "Rates"},
        headers=author_headers,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["error"] is None
    assert body["meta"]["version"] == "v1"
    assert "timestamp" in body["meta"]

    data = body["data"]
    assert data["slug"] == "bi-holds-rate"
    assert data["status"] == "DRAFT"
    assert data["view_count"] == 0
    assert data["meta_title"] == "BI Holds Rate"
    assert data["meta_description"] == "Rates"
    assert data["tags"] == []


def test_create_requires_auth(client):
    resp = client.post(f"{API}/news", json={"title": "T", "content": "C"})

    assert resp.status_code == 401
    body = resp.json()
    assert body["data"] is None
    assert body["error"]["code"] == "UNAUTHORIZED"


def test_create_with_bad_token(client):
    resp = client.post(
        f"{API}/news",
        json={"title": "T", "content": "C"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Invalid token"


def test_create_duplicate_slug_conflict(client, author_headers):
    create_news(client, author_headers)
    resp = client.post(
        f"{API}/news",
        json={"title": "IHSG closes higher!", "content": "Again"},
        headers=author_headers,
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


def test_create_missing_field_is_422(client, author_headers):
    resp = client.post(f"{API}/news", json={"title": "No body"}, headers=author_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_create_empty_content_is_400(client, author_headers):
    resp = client.post(
        f"{API}/news", json={"title": "Empty body", "content": "  "}, headers=author_headers
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == {"code": "VALIDATION_ERROR", "message": "Content is required"}


def test_full_lifecycle(client, author_headers, editor_headers):
    news = create_news(client, author_headers)

    published = publish(client, news["id"], author_headers, editor_headers)
    assert published["status"] == "PUBLISHED"
    assert published["editor_id"] is not None
    assert published["published_at"] is not None

    featured = client.post(f"{API}/news/{news['id']}/feature", headers=author_headers)
    assert featured.json()["data"]["is_featured"] is True

    listed = client.get(f"{API}/news/featured").json()["data"]
    assert [n["id"] for n in listed] == [news["id"]]

    archived = client.post(f"{API}/news/{news['id']}/archive", headers=editor_headers)
    assert archived.json()["data"]["status"] == "ARCHIVED"


def test_public_read_counts_views(client, author_headers, editor_headers):
    news = create_news(client, author_headers)
    publish(client, news["id"], author_headers, editor_headers)

    client.get(f"{API}/news/{news['slug']}")
    resp = client.get(f"{API}/news/{news['slug']}")

    data = resp.json()["data"]
    assert data["view_count"] == 2
    assert [t["name"] for t in data["tags"]] == ["IHSG"]

    # Staff lookup by id does not count
    by_id = client.get(f"{API}/news/id/{news['id']}", headers=author_headers)
    assert by_id.json()["data"]["view_count"] == 2


def test_author_cannot_publish(client, author_headers):
    news = create_news(client, author_headers)
    client.post(f"{API}/news/{news['id']}/submit", headers=author_headers)

    resp = client.post(f"{API}/news/{news['id']}/publish", headers=author_headers)

    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"


def test_publish_with_explicit_editor(client, author_headers, editor_headers):
    news = create_news(client, author_headers)
    client.post(f"{API}/news/{news['id']}/submit", headers=author_headers)

    resp = client.post(
        f"{API}/news/{news['id']}/publish", json={"editor_id": "desk-7"}, headers=editor_headers
    )

    assert resp.json()["data"]["editor_id"] == "desk-7"


def test_illegal_transition_is_400(client, author_headers, editor_headers):
    news = create_news(client, author_headers)

    resp = client.post(f"{API}/news/{news['id']}/publish", headers=editor_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ILLEGAL_TRANSITION"


def test_feature_draft_rejected(client, author_headers):
    news = create_news(client, author_headers)
    resp = client.post(f"{API}/news/{news['id']}/feature", headers=author_headers)
    assert resp.status_code == 400


def test_update_partial_and_tags(client, author_headers):
    news = create_news(client, author_headers, excerpt="Keep me", subtitle="Drop me")

    resp = client.patch(
        f"{API}/news/{news['id']}",
        json={"title": "IHSG Closes Sharply Higher", "subtitle": None, "tags": ["Banking"]},
        headers=author_headers,
    )

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["title"] == "IHSG Closes Sharply Higher"
    assert data["excerpt"] == "Keep me"
    assert data["subtitle"] is None
    assert data["slug"] == news["slug"]
    assert [t["name"] for t in data["tags"]] == ["Banking"]


def test_update_published_rejected(client, author_headers, editor_headers):
    news = create_news(client, author_headers)
    publish(client, news["id"], author_headers, editor_headers)

    resp = client.patch(f"{API}/news/{news['id']}", json={"title": "x"}, headers=author_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Can only edit news in DRAFT status"


def test_unpublish(client, author_headers, editor_headers):
    news = create_news(client, author_headers)
    publish(client, news["id"], author_headers, editor_headers)

    resp = client.post(f"{API}/news/{news['id']}/unpublish", headers=editor_headers)

    data = resp.json()["data"]
    assert data["status"] == "DRAFT"
    assert data["published_at"] is None


def test_list_filters_and_pagination(client, author_headers, editor_headers):
    ids = [
        create_news(client, author_headers, title=f"Story {i}", tags=[])["id"] for i in range(3)
    ]
    publish(client, ids[0], author_headers, editor_headers)

    resp = client.get(f"{API}/news", params={"limit": 2})
    data = resp.json()["data"]
    assert len(data["items"]) == 2
    assert data["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "total_pages": 2,
        "has_next": True,
        "has_prev": False,
    }
    assert "content" not in data["items"][0]

    published = client.get(f"{API}/news", params={"status": "PUBLISHED"}).json()["data"]
    assert [n["id"] for n in published["items"]] == [ids[0]]

    searched = client.get(f"{API}/news", params={"search": "Story 2"}).json()["data"]
    assert [n["id"] for n in searched["items"]] == [ids[2]]


def test_list_by_tag(client, author_headers):
    tagged = create_news(client, author_headers, title="Tagged", tags=["Mining"])
    create_news(client, author_headers, title="Untagged", tags=[])
    tag_id = client.get(f"{API}/tags").json()["data"][0]["id"]

    items = client.get(f"{API}/news", params={"tag_id": tag_id}).json()["data"]["items"]

    assert [n["id"] for n in items] == [tagged["id"]]


def test_invalid_sort_field_is_422(client):
    resp = client.get(f"{API}/news", params={"sort_by": "password"})
    assert resp.status_code == 422


def test_delete_is_soft(client, author_headers):
    news = create_news(client, author_headers)

    resp = client.delete(f"{API}/news/{news['id']}", headers=author_headers)
    assert resp.status_code == 204

    assert client.get(f"{API}/news/{news['slug']}").status_code == 404
    assert client.delete(f"{API}/news/{news['id']}", headers=author_headers).status_code == 404

    # Slug becomes available again
    again = create_news(client, author_headers)
    assert again["slug"] == news["slug"]


def test_unknown_slug_is_404(client):
    resp = client.get(f"{API}/news/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


def test_unknown_category_is_404(client, author_headers):
    resp = client.post(
        f"{API}/news",
        json={"title": "Orphan", "content": "Body", "category_id": "missing"},
        headers=author_headers,
    )
    assert resp.status_code == 404


def test_unusable_tag_name_creates_nothing(client, author_headers):
    resp = client.post(
        f"{API}/news",
        json={"title": "Orphan Story", "content": "Body", "tags": ["$$$"]},
        headers=author_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get(f"{API}/news").json()["data"]["pagination"]["total"] == 0
    assert client.get(f"{API}/tags").json()["data"] == []

    retry = create_news(client, author_headers, title="Orphan Story", tags=["IHSG"])
    assert retry["slug"] == "orphan-story"


def test_unusable_tag_name_on_update_changes_nothing(client, author_headers):
    news = create_news(client, author_headers)

    resp = client.patch(
        f"{API}/news/{news['id']}",
        json={"title": "Renamed", "tags": ["IHSG", "%%"]},
        headers=author_headers,
    )

    assert resp.status_code == 400
    fetched = client.get(f"{API}/news/id/{news['id']}", headers=author_headers).json()["data"]
    assert fetched["title"] == news["title"]
    assert [t["name"] for t in fetched["tags"]] == ["IHSG"]


def test_list_date_range(client, author_headers):
    news = create_news(client, author_headers)

    future = client.get(f"{API}/news", params={"date_from": "2999-01-01T00:00:00+00:00"})
    assert future.json()["data"]["pagination"]["total"] == 0

    since_2000 = client.get(f"{API}/news", params={"date_from": "2000-01-01T00:00:00Z"})
    assert [n["id"] for n in since_2000.json()["data"]["items"]] == [news["id"]]

    until_2000 = client.get(f"{API}/news", params={"date_to": "2000-01-01T00:00:00Z"})
    assert until_2000.json()["data"]["items"] == []


def test_list_bad_date_is_422(client):
    resp = client.get(f"{API}/news", params={"date_from": "yesterday"})
    assert resp.status_code == 422


def test_update_empty_strings_clear_fields(client, author_headers):
    category = client.post(
        f"{API}/categories", json={"name": "Banking"}, headers=author_headers
    ).json()["data"]
    news = create_news(client, author_headers, category_id=category["id"], subtitle="Sub")

    resp = client.patch(
        f"{API}/news/{news['id']}",
        json={"category_id": "", "subtitle": ""},
        headers=author_headers,
    )

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["category"] is None
    assert data["category_id"] is None
    assert data["subtitle"] is None
