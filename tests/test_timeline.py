import json

from diary.service.clock import utc_today


def _answer(client, headers, answer_type, text):
    return client.post(
        "/api/answers",
        json={"type": answer_type, "question_1": text, "question_2": "-", "question_3": "-"},
        headers=headers,
    ).get_json()


def _practice(client, headers):
    return client.post(
        "/api/practices",
        json={"type": "calm_breathing", "duration_seconds": 120},
        headers=headers,
    ).get_json()


def test_empty_timeline(client, alice):
    body = client.get("/api/timeline", headers=alice).get_json()
    assert body["is_empty"] is True
    assert body["entries"] == []
    assert body["filter"] == "all"


def test_feed_merges_newest_first(client, alice):
    morning = _answer(client, alice, "morning", "Sunrise")
    practice = _practice(client, alice)
    evening = _answer(client, alice, "evening", "Sunset")

    entries = client.get("/api/timeline", headers=alice).get_json()["entries"]
    assert [(entry["kind"], entry["record"]["id"]) for entry in entries] == [
        ("answer", evening["id"]),
        ("practice", practice["id"]),
        ("answer", morning["id"]),
    ]


def test_type_filter_applies_to_answers_only(client, alice):
    _answer(client, alice, "morning", "Sunrise")
    evening = _answer(client, alice, "evening", "Sunset")
    _practice(client, alice)

    body = client.get("/api/timeline?type=evening", headers=alice).get_json()
    assert [answer["id"] for answer in body["answers"]] == [evening["id"]]
    assert len(body["practices"]) == 1
    assert len(body["entries"]) == 2


def test_search(client, alice):
    _answer(client, alice, "morning", "Coffee")
    tea = _answer(client, alice, "evening", "Green TEA")
    body = client.get("/api/timeline?search=tea", headers=alice).get_json()
    assert [answer["id"] for answer in body["answers"]] == [tea["id"]]
    assert body["search"] == "tea"


def test_invalid_filter(client, alice):
    assert client.get("/api/timeline?type=noon", headers=alice).status_code == 400


def test_export(client, alice, bob):
    _answer(client, alice, "morning", "Sunrise")
    evening = _answer(client, alice, "evening", "Sunset")
    _practice(client, alice)
    _answer(client, bob, "evening", "Not mine")

    response = client.get("/api/timeline/export?type=evening", headers=alice)
    assert response.status_code == 200
    assert response.mimetype == "application/json"
    expected_name = f"ai-diary-export-{utc_today().isoformat()}.json"
    assert expected_name in response.headers["Content-Disposition"]

    snapshot = json.loads(response.get_data(as_text=True))
    assert [answer["id"] for answer in snapshot["answers"]] == [evening["id"]]
    assert len(snapshot["practices"]) == 1
    assert snapshot["exported_at"]


def test_export_requires_auth(client):
    assert client.get("/api/timeline/export").status_code == 401
