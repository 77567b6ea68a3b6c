"""
Tests for the /api/v1/memos endpoints.
"""

import pytest

MEMOS = "/api/v1/memos/"


def create(client, headers, **payload):
    resp = client.post(MEMOS, json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreate:
    def test_created(self, client, login):
        headers = login()
        resp = client.post(MEMOS, json={"title": "Test Memo", "content": "This is a test memo."}, headers=headers)
        assert resp.status_code == 201
        memo = resp.json()
        assert memo["title"] == "Test Memo"
        assert memo["content"] == "This is a test memo."
        assert memo["id"]
        assert memo["user_id"]
        assert memo["related_memo_ids"] == []

    def test_with_relations(self, client, login):
        memo = create(client, login(), title="T", content="C", related_memo_ids=["a", "b"])
        assert memo["related_memo_ids"] == ["a", "b"]

    @pytest.mark.parametrize("payload", [{"content": "no title"}, {"title": "", "content": "x"}])
    def test_title_required(self, client, login, payload):
        resp = client.post(MEMOS, json=payload, headers=login())
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Title is required"


class TestMalformedInput:
    def test_null_title(self, client, login):
        resp = client.post(MEMOS, json={"title": None, "content": "x"}, headers=login())
        assert resp.status_code == 400
        assert "title" in resp.json()["detail"]

    def test_invalid_json(self, client, login):
        headers = {**login(), "Content-Type": "application/json"}
        resp = client.post(MEMOS, content=b"{not json", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid request: Request body is not valid JSON"

    def test_relations_must_be_a_list(self, client, login):
        headers = login()
        memo = create(client, headers, title="T", related_memo_ids=["a"])
        resp = client.put(f"{MEMOS}{memo['id']}", json={"related_memo_ids": "a,b"}, headers=headers)
        assert resp.status_code == 400
        assert "related_memo_ids" in resp.json()["detail"]
        assert client.get(f"{MEMOS}{memo['id']}", headers=headers).json()["related_memo_ids"] == ["a"]

    def test_non_string_content(self, client, login):
        resp = client.post(MEMOS, json={"title": "T", "content": 5}, headers=login())
        assert resp.status_code == 400


class TestRead:
    def test_list_newest_first(self, client, login):
        headers = login()
        for i in range(3):
            create(client, headers, title=f"Memo {i + 1}", content=f"Content {i + 1}")
        resp = client.get(MEMOS, headers=headers)
        assert resp.status_code == 200
        memos = resp.json()
        assert len(memos) == 3
        assert memos[0]["title"] == "Memo 3"

    def test_list_with_blank_q_is_unfiltered(self, client, login):
        headers = login()
        create(client, headers, title="one")
        resp = client.get(MEMOS, params={"q": "  "}, headers=headers)
        assert resp.status_code == 200
        assert len(resp.json()) == 1

    def test_get(self, client, login):
        headers = login()
        memo = create(client, headers, title="T", content="C", related_memo_ids=["a", "b"])
        resp = client.get(f"{MEMOS}{memo['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == memo

    def test_get_not_found(self, client, login):
        resp = client.get(f"{MEMOS}99999", headers=login())
        assert resp.status_code == 404

    def test_isolation_between_users(self, client, login):
        owner = login("owner")
        intruder = login("intruder")
        memo = create(client, owner, title="private")
        assert client.get(f"{MEMOS}{memo['id']}", headers=intruder).status_code == 404
        assert client.put(f"{MEMOS}{memo['id']}", json={"title": "x"}, headers=intruder).status_code == 404
        assert client.delete(f"{MEMOS}{memo['id']}", headers=intruder).status_code == 404
        assert client.get(MEMOS, headers=intruder).json() == []
        assert client.get(f"{MEMOS}{memo['id']}", headers=owner).json()["title"] == "private"


class TestSearch:
    @pytest.fixture
    def headers(self, client, login):
        headers = login("searchuser")
        for title, content in [
            ("First Test Memo", "Content with keyword Alpha"),
            ("Second Alpha Memo", "Some other text"),
            ("Third Memo", "Another one with Bravo"),
            ("Unique Content", "This is a test for Charlie"),
        ]:
            create(client, headers, title=title, content=content)
        return headers

    def test_alpha(self, client, headers):
        resp = client.get(f"{MEMOS}search", params={"q": "Alpha"}, headers=headers)
        assert resp.status_code == 200
        assert [m["title"] for m in resp.json()] == ["Second Alpha Memo", "First Test Memo"]

    def test_charlie(self, client, headers):
        results = client.get(f"{MEMOS}search", params={"q": "Charlie"}, headers=headers).json()
        assert len(results) == 1
        assert results[0]["title"] == "Unique Content"

    def test_no_match(self, client, headers):
        resp = client.get(f"{MEMOS}search", params={"q": "NonExistentKeyword"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json() == []

    def test_missing_query(self, client, headers):
        assert client.get(f"{MEMOS}search", headers=headers).status_code == 400

    def test_blank_query(self, client, headers):
        assert client.get(f"{MEMOS}search", params={"q": " "}, headers=headers).status_code == 400

    def test_list_with_q_filters(self, client, headers):
        results = client.get(MEMOS, params={"q": "bravo"}, headers=headers).json()
        assert [m["title"] for m in results] == ["Third Memo"]


class TestUpdate:
    def test_equivalent_relations_keep_updated_at(self, client, login):
        headers = login()
        memo = create(client, headers, title="T", related_memo_ids=["a"])
        resp = client.put(f"{MEMOS}{memo['id']}", json={"related_memo_ids": [" a "]}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["updated_at"] == memo["updated_at"]

    def test_title_and_content(self, client, login):
        headers = login("updateuser")
        memo = create(client, headers, title="Original Title", content="Original Content")
        resp = client.put(
            f"{MEMOS}{memo['id']}",
            json={"title": "Updated Title", "content": "Updated Content"},
            headers=headers,
        )
        assert resp.status_code == 200
        updated = resp.json()
        assert updated["title"] == "Updated Title"
        assert updated["content"] == "Updated Content"

    def test_clear_relations(self, client, login):
        headers = login()
        memo = create(client, headers, title="T", content="C", related_memo_ids=["a", "b"])
        resp = client.put(f"{MEMOS}{memo['id']}", json={"related_memo_ids": []}, headers=headers)
        assert resp.status_code == 200
        fetched = client.get(f"{MEMOS}{memo['id']}", headers=headers).json()
        assert fetched["related_memo_ids"] == []
        assert fetched["title"] == "T"
        assert fetched["content"] == "C"

    def test_null_fields_left_unchanged(self, client, login):
        headers = login()
        memo = create(client, headers, title="T", content="C", related_memo_ids=["a"])
        resp = client.put(
            f"{MEMOS}{memo['id']}",
            json={"title": None, "content": None, "related_memo_ids": None},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json() == memo

    def test_empty_body_returns_memo_unchanged(self, client, login):
        headers = login()
        memo = create(client, headers, title="T")
        resp = client.put(f"{MEMOS}{memo['id']}", json={}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["updated_at"] == memo["updated_at"]

    def test_empty_title(self, client, login):
        headers = login()
        memo = create(client, headers, title="T", content="C")
        resp = client.put(f"{MEMOS}{memo['id']}", json={"title": ""}, headers=headers)
        assert resp.status_code == 400
        assert client.get(f"{MEMOS}{memo['id']}", headers=headers).json()["title"] == "T"

    def test_not_found(self, client, login):
        resp = client.put(f"{MEMOS}nope", json={"title": "x"}, headers=login())
        assert resp.status_code == 404


class TestDelete:
    def test_delete(self, client, login):
        headers = login("deleteuser")
        memo = create(client, headers, title="To Be Deleted", content="Delete me")
        resp = client.delete(f"{MEMOS}{memo['id']}", headers=headers)
        assert resp.status_code == 200
        assert "deleted successfully" in resp.json()["message"]
        assert client.get(f"{MEMOS}{memo['id']}", headers=headers).status_code == 404

    def test_not_found(self, client, login):
        assert client.delete(f"{MEMOS}nope", headers=login()).status_code == 404
