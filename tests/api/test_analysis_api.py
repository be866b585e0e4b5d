"""
Analysis API tests.
"""

API = "/api/v1"
BODY = "Breakout above the 200-day average on rising volume suggests further upside."


def create_analysis(client, headers, **overrides):
    body = {
        "title": "BBRI technical breakout",
        "content": BODY,
        "stock_ticker": "bbri",
        "analysis_type": "technical",
        "target_price": 5800,
    }
    body.update(overrides)
    resp = client.post(f"{API}/analysis", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def publish(client, analysis_id, author_headers, editor_headers):
    client.post(f"{API}/analysis/{analysis_id}/submit", headers=author_headers)
    resp = client.post(f"{API}/analysis/{analysis_id}/publish", headers=editor_headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def test_create_normalises_fields(client, author_headers):
    data = create_analysis(client, author_headers)

    assert data["stock_ticker"] == "BBRI"
    assert data["analysis_type"] == "TECHNICAL"
    assert data["target_price"] == 5800
    assert data["status"] == "DRAFT"
    assert data["slug"] == "bbri-technical-breakout"


def test_create_short_title_rejected(client, author_headers):
    resp = client.post(
        f"{API}/analysis",
        json={"title": "Short", "content": BODY, "stock_ticker": "BBRI", "analysis_type": "TECHNICAL"},
        headers=author_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Title must be at least 10 characters"


def test_create_negative_target_rejected(client, author_headers):
    resp = client.post(
        f"{API}/analysis",
        json={
            "title": "TLKM valuation check",
            "content": BODY,
            "stock_ticker": "TLKM",
            "analysis_type": "FUNDAMENTAL",
            "target_price": -100,
        },
        headers=author_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Target price must be positive"


def test_create_bad_type_rejected(client, author_headers):
    resp = client.post(
        f"{API}/analysis",
        json={
            "title": "TLKM valuation check",
            "content": BODY,
            "stock_ticker": "TLKM",
            "analysis_type": "GUESSWORK",
        },
        headers=author_headers,
    )
    assert resp.status_code == 400
    assert "Invalid analysis type" in resp.json()["error"]["message"]


def test_latest_by_stock(client, author_headers, editor_headers):
    first = create_analysis(client, author_headers)
    create_analysis(client, author_headers, title="BBRI draft that stays a draft")
    create_analysis(client, author_headers, title="TLKM dividend outlook", stock_ticker="TLKM")
    publish(client, first["id"], author_headers, editor_headers)

    resp = client.get(f"{API}/analysis/stock/bbri")

    assert resp.status_code == 200
    items = resp.json()["data"]
    assert [a["id"] for a in items] == [first["id"]]
    assert items[0]["stock_ticker"] == "BBRI"


def test_latest_by_stock_invalid_ticker(client):
    resp = client.get(f"{API}/analysis/stock/BB-RI")
    assert resp.status_code == 400


def test_list_filters(client, author_headers):
    create_analysis(client, author_headers)
    create_analysis(
        client,
        author_headers,
        title="TLKM dividend outlook",
        stock_ticker="TLKM",
        analysis_type="FUNDAMENTAL",
    )
    create_analysis(client, author_headers, title="ASII sentiment turns", stock_ticker="ASII")

    multi = client.get(f"{API}/analysis", params={"stock_tickers": "bbri, tlkm"}).json()["data"]
    assert {a["stock_ticker"] for a in multi["items"]} == {"BBRI", "TLKM"}
    assert multi["pagination"]["total"] == 2

    single = client.get(f"{API}/analysis", params={"stock_ticker": "ASII"}).json()["data"]
    assert [a["stock_ticker"] for a in single["items"]] == ["ASII"]

    fundamental = client.get(f"{API}/analysis", params={"analysis_type": "fundamental"})
    assert [a["stock_ticker"] for a in fundamental.json()["data"]["items"]] == ["TLKM"]


def test_view_count_and_feature(client, author_headers, editor_headers):
    analysis = create_analysis(client, author_headers)
    publish(client, analysis["id"], author_headers, editor_headers)

    viewed = client.get(f"{API}/analysis/{analysis['slug']}").json()["data"]
    assert viewed["view_count"] == 1

    client.post(f"{API}/analysis/{analysis['id']}/feature", headers=author_headers)
    featured = client.get(f"{API}/analysis/featured").json()["data"]
    assert [a["id"] for a in featured] == [analysis["id"]]

    client.post(f"{API}/analysis/{analysis['id']}/unfeature", headers=author_headers)
    assert client.get(f"{API}/analysis/featured").json()["data"] == []


def test_update_in_draft(client, author_headers):
    analysis = create_analysis(client, author_headers)

    resp = client.patch(
        f"{API}/analysis/{analysis['id']}",
        json={"stock_ticker": "bmri", "target_price": 7000},
        headers=author_headers,
    )

    data = resp.json()["data"]
    assert data["stock_ticker"] == "BMRI"
    assert data["target_price"] == 7000


def test_no_archive_route(client, author_headers, editor_headers):
    analysis = create_analysis(client, author_headers)
    publish(client, analysis["id"], author_headers, editor_headers)

    resp = client.post(f"{API}/analysis/{analysis['id']}/archive", headers=editor_headers)

    assert resp.status_code in (404, 405)


def test_delete(client, author_headers):
    analysis = create_analysis(client, author_headers)
    assert client.delete(f"{API}/analysis/{analysis['id']}", headers=author_headers).status_code == 204
    resp = client.get(f"{API}/analysis/id/{analysis['id']}", headers=author_headers)
    assert resp.status_code == 404


def test_unusable_tag_name_creates_nothing(client, author_headers):
    body = {
        "title": "ASII momentum fades",
        "content": BODY,
        "stock_ticker": "ASII",
        "analysis_type": "TECHNICAL",
    }

    resp = client.post(f"{API}/analysis", json={**body, "tags": ["$$$"]}, headers=author_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get(f"{API}/analysis").json()["data"]["pagination"]["total"] == 0

    resp = client.post(f"{API}/analysis", json={**body, "tags": ["x" * 51]}, headers=author_headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Tag name must be 50 characters or less"

    retry = create_analysis(client, author_headers, **body, tags=["Otomotif"])
    assert retry["slug"] == "asii-momentum-fades"


def test_list_date_range(client, author_headers):
    analysis = create_analysis(client, author_headers)

    future = client.get(f"{API}/analysis", params={"date_from": "2999-01-01T00:00:00+07:00"})
    assert future.json()["data"]["pagination"]["total"] == 0

    window = client.get(
        f"{API}/analysis",
        params={"date_from": "2000-01-01T00:00:00Z", "date_to": "2999-01-01T00:00:00Z"},
    )
    assert [a["id"] for a in window.json()["data"]["items"]] == [analysis["id"]]


def test_update_empty_strings_clear_fields(client, author_headers):
    analysis = create_analysis(client, author_headers, excerpt="Quick take")

    resp = client.patch(
        f"{API}/analysis/{analysis['id']}",
        json={"excerpt": "", "category_id": ""},
        headers=author_headers,
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["excerpt"] is None
    assert resp.json()["data"]["category"] is None
