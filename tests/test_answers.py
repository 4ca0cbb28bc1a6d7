def _create(client, headers, **overrides):
    payload = {
        "type": "morning",
        "question_1": "Sunshine",
        "question_2": "Music",
        "question_3": "My neighbour",
    }
    payload.update(overrides)
    response = client.post("/api/answers", json=payload, headers=headers)
    assert response.status_code == 201
    return response.get_json()


def test_requires_authentication(client):
    response = client.get("/api/answers")
    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}


def test_invalid_token_is_unauthorized(client):
    response = client.get("/api/answers", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_create_and_list(client, alice):
    created = _create(client, alice)
    assert created["type"] == "morning"
    assert created["user_id"] == "alice"
    assert created["created_at"] == created["updated_at"]

    listed = client.get("/api/answers", headers=alice).get_json()["answers"]
    assert [answer["id"] for answer in listed] == [created["id"]]


def test_ids_increase(client, alice):
    first = _create(client, alice)
    second = _create(client, alice, type="evening")
    assert second["id"] > first["id"]


def test_missing_fields_are_rejected(client, alice):
    response = client.post("/api/answers", json={"type": "morning"}, headers=alice)
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "invalid request"
    fields = {detail["field"] for detail in body["details"]}
    assert {"question_1", "question_2", "question_3"} <= fields


def test_invalid_type_is_rejected(client, alice):
    response = client.post(
        "/api/answers",
        json={"type": "noon", "question_1": "a", "question_2": "b", "question_3": "c"},
        headers=alice,
    )
    assert response.status_code == 400


def test_filter_by_type(client, alice):
    _create(client, alice, type="morning")
    evening = _create(client, alice, type="evening")
    listed = client.get("/api/answers?type=evening", headers=alice).get_json()["answers"]
    assert [answer["id"] for answer in listed] == [evening["id"]]


def test_empty_type_means_all(client, alice):
    _create(client, alice, type="morning")
    _create(client, alice, type="evening")
    listed = client.get("/api/answers?type=", headers=alice).get_json()["answers"]
    assert len(listed) == 2


def test_search_is_case_insensitive_and_newest_first(client, alice):
    older = _create(client, alice, question_1="Went for a Run in the park")
    _create(client, alice, question_1="Stayed in", question_2="Read", question_3="Slept")
    newer = _create(client, alice, type="evening", question_3="another run tomorrow")

    listed = client.get("/api/answers?search=RUN", headers=alice).get_json()["answers"]
    assert [answer["id"] for answer in listed] == [newer["id"], older["id"]]


def test_limit_and_offset(client, alice):
    ids = [_create(client, alice)["id"] for _ in range(5)]
    page = client.get("/api/answers?limit=2&offset=1", headers=alice).get_json()["answers"]
    assert [answer["id"] for answer in page] == [ids[3], ids[2]]


def test_limit_out_of_range(client, alice):
    response = client.get("/api/answers?limit=0", headers=alice)
    assert response.status_code == 400


def test_partial_update_keeps_absent_fields(client, alice):
    created = _create(client, alice)
    response = client.put(
        f"/api/answers/{created['id']}",
        json={"question_2": "Birdsong"},
        headers=alice,
    )
    assert response.status_code == 200
    updated = response.get_json()
    assert updated["question_1"] == created["question_1"]
    assert updated["question_2"] == "Birdsong"
    assert updated["question_3"] == created["question_3"]
    assert updated["type"] == created["type"]
    assert updated["updated_at"] >= created["updated_at"]


def test_empty_patch_returns_record(client, alice):
    created = _create(client, alice)
    response = client.put(f"/api/answers/{created['id']}", json={}, headers=alice)
    assert response.status_code == 200
    assert response.get_json()["question_1"] == created["question_1"]


def test_owner_isolation(client, alice, bob):
    created = _create(client, alice)

    assert client.get("/api/answers", headers=bob).get_json()["answers"] == []
    response = client.put(f"/api/answers/{created['id']}", json={"question_1": "x"}, headers=bob)
    assert response.status_code == 404
    response = client.delete(f"/api/answers/{created['id']}", headers=bob)
    assert response.status_code == 404

    still_there = client.get("/api/answers", headers=alice).get_json()["answers"]
    assert still_there[0]["question_1"] == "Sunshine"


def test_delete_twice(client, alice):
    created = _create(client, alice)
    first = client.delete(f"/api/answers/{created['id']}", headers=alice)
    assert first.status_code == 200
    assert first.get_json() == {"success": True}

    second = client.delete(f"/api/answers/{created['id']}", headers=alice)
    assert second.status_code == 404
    assert second.get_json() == {"error": "Answer not found"}


def test_questions_catalog(client, alice):
    body = client.get("/api/questions?type=evening", headers=alice).get_json()
    assert list(body["questions"]) == ["evening"]
    assert len(body["questions"]["evening"]) == 3

    everything = client.get("/api/questions", headers=alice).get_json()["questions"]
    assert set(everything) == {"morning", "evening"}

    assert client.get("/api/questions?type=noon", headers=alice).status_code == 400


def test_search_gratitude_scenario(client, alice):
    first = _create(client, alice, question_1="gratitude")
    _create(client, alice, question_1="fear")
    third = _create(client, alice, question_1="gratitude journal")

    listed = client.get("/api/answers?search=gratitude", headers=alice).get_json()["answers"]
    assert [answer["id"] for answer in listed] == [third["id"], first["id"]]


def test_clear_answer_field(client, alice):
    created = _create(client, alice)
    updated = client.put(
        f"/api/answers/{created['id']}", json={"question_3": None}, headers=alice
    ).get_json()
    assert updated["question_3"] is None
    assert updated["question_1"] == created["question_1"]
