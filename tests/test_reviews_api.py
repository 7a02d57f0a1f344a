# tests/test_reviews_api.py
import pytest

from reviews import repository


def test_insert_review_success(client, fake_repository, valid_payload):
    resp = client.post("/query6/insertReview", json=valid_payload)

    assert resp.status_code == 200
    assert resp.json() == {
        "user_name": "Ann",
        "new_review": "Great",
        "mediaTitle": "Dune",
        "avg_score": 9,
    }


def test_second_submission_reports_new_average(client, fake_repository, valid_payload):
    client.post("/query6/insertReview", json=valid_payload)
    resp = client.post("/query6/insertReview", json={**valid_payload, "name": "Bob", "score": 5})

    assert resp.status_code == 200
    assert resp.json()["avg_score"] == 7


def test_missing_score_is_a_plain_text_400(client, fake_repository, fake_conn, valid_payload):
    del valid_payload["score"]

    resp = client.post("/query6/insertReview", json=valid_payload)

    assert resp.status_code == 400
    assert resp.text == "Missing required field: score"
    assert resp.headers["content-type"].startswith("text/plain")
    assert fake_repository.users == {}
    assert fake_repository.reviews == {}
    # Validation happens before a connection is taken from the pool.
    assert fake_conn.acquired == 0


def test_out_of_range_media_id_is_a_400_before_any_insert(client, fake_repository, fake_conn, valid_payload):
    resp = client.post("/query6/insertReview", json={**valid_payload, "mediaID": 10**12})

    assert resp.status_code == 400
    assert resp.text == "Invalid field: mediaID"
    assert fake_repository.users == {}
    assert fake_conn.acquired == 0


def test_invalid_score_is_a_400(client, fake_repository, valid_payload):
    resp = client.post("/query6/insertReview", json={**valid_payload, "score": 42})

    assert resp.status_code == 400
    assert resp.text == "Invalid field: score"


def test_non_json_body_is_a_400(client, fake_repository):
    resp = client.post(
        "/query6/insertReview",
        content=b"name=Ann",
        headers={"content-type": "application/x-www-form-urlencoded"},
    )

    assert resp.status_code == 400
    assert resp.text == "Invalid request body"


def test_review_insert_failure_is_a_500_and_leaves_no_user(client, fake_repository, valid_payload):
    resp = client.post("/query6/insertReview", json={**valid_payload, "mediaID": 999})

    assert resp.status_code == 500
    assert resp.text == "Review insert failed"
    assert fake_repository.users == {}


@pytest.mark.parametrize(
    ("step", "message"),
    [
        ("begin", "Transaction start failed"),
        ("insert_user", "User insert failed"),
        ("fetch_submission_summary", "Final data retrieval failed"),
        ("commit", "Commit failed"),
    ],
)
def test_stage_failures_are_reported_by_name(client, fake_repository, valid_payload, step, message):
    fake_repository.fail_on.add(step)

    resp = client.post("/query6/insertReview", json=valid_payload)

    assert resp.status_code == 500
    assert resp.text == message
    assert fake_repository.users == {}
    assert fake_repository.reviews == {}


def test_review_patterns_rejects_out_of_bounds_score(client):
    resp = client.get("/query2/reviewPatterns", params={"minScore": 11})

    assert resp.status_code == 400
    assert resp.text == "Error. Score outside bounds."


def test_review_patterns_passes_filters(client, monkeypatch):
    calls = []

    async def fake_list(*, min_score, media_id=None):
        calls.append((min_score, media_id))
        return [{"userName": "Ann", "mediaTitle": "Dune", "review": "Great", "score": 9}]

    monkeypatch.setattr(repository, "list_review_patterns", fake_list)

    resp = client.get("/query2/reviewPatterns", params={"minScore": 8, "mediaID": "7"})

    assert resp.status_code == 200
    assert resp.json()[0]["userName"] == "Ann"
    assert calls == [(8, 7)]


def test_review_patterns_blank_media_filter_means_all(client, monkeypatch):
    calls = []

    async def fake_list(*, min_score, media_id=None):
        calls.append((min_score, media_id))
        return []

    monkeypatch.setattr(repository, "list_review_patterns", fake_list)

    resp = client.get("/query2/reviewPatterns?minScore=5&mediaID=")

    assert resp.status_code == 200
    assert calls == [(5, None)]


def test_review_patterns_query_failure(client, monkeypatch):
    async def broken(**_):
        raise ConnectionRefusedError("db down")

    monkeypatch.setattr(repository, "list_review_patterns", broken)

    resp = client.get("/query2/reviewPatterns", params={"minScore": 5})

    assert resp.status_code == 500
    assert resp.text == "Error retrieving specific review patterns"
