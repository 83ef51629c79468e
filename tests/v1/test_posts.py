"""Tests for the post, reaction, and reply endpoints."""

from fastapi.testclient import TestClient

from cityscope.models import ReactionKind
from tests.conftest import identity_of


def _create(client: TestClient, headers, **fields):
    data = {"content": "Lost cat near the park", "postType": "help", "location": "Elm Street"}
    data.update(fields)
    return client.post("/api/posts", data=data, headers=headers)


class TestCreatePost:
    def test_requires_authentication(self, client: TestClient) -> None:
        response = _create(client, headers={})

        assert response.status_code == 401
        assert response.json() == {"message": "No token, authorization denied"}

    def test_creates_post_from_form(self, client: TestClient, alice, alice_auth) -> None:
        response = _create(client, alice_auth)

        assert response.status_code == 201
        post = response.json()["post"]
        assert post["content"] == "Lost cat near the park"
        assert post["postType"] == "help"
        assert post["location"] == "Elm Street"
        assert post["author"] == {"id": alice.id, "username": "alice", "location": "Elm Street"}
        assert post["imageUrl"] is None
        assert post["likes"] == 0
        assert post["dislikes"] == 0
        assert post["userReaction"] is None
        assert post["replies"] == []

    def test_attaches_image(self, client: TestClient, alice_auth, image_store) -> None:
        response = client.post(
            "/api/posts",
            data={"content": "Found this cat", "postType": "help", "location": "Elm Street"},
            files={"image": ("cat.png", b"\x89PNG\r\n", "image/png")},
            headers=alice_auth,
        )

        assert response.status_code == 201
        image_url = response.json()["post"]["imageUrl"]
        assert image_url.endswith("cat.png")
        assert image_store.images[image_url] == b"\x89PNG\r\n"

    def test_rejects_non_image_file(self, client: TestClient, alice_auth, image_store) -> None:
        response = client.post(
            "/api/posts",
            data={"content": "Read this", "location": "Elm Street"},
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=alice_auth,
        )

        assert response.status_code == 400
        assert response.json()["errors"] == ["Only image uploads are allowed"]
        assert image_store.images == {}

    def test_reports_all_invalid_fields(self, client: TestClient, alice_auth) -> None:
        response = _create(client, alice_auth, content="x" * 281, postType="gossip", location="")

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation Error"
        assert len(body["errors"]) == 3

    def test_storage_failure_is_hidden(self, client: TestClient, alice_auth, image_store) -> None:
        image_store.fail = True
        response = client.post(
            "/api/posts",
            data={"content": "Found this cat", "location": "Elm Street"},
            files={"image": ("cat.png", b"\x89PNG", "image/png")},
            headers=alice_auth,
        )

        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}
        assert client.get("/api/posts").json() == {"posts": []}


class TestReadPosts:
    def test_list_filters_and_order(self, client: TestClient, alice, bob, make_post) -> None:
        older = make_post(alice, post_type="event", location="Elm Street")
        make_post(bob, post_type="help", location="Oak Avenue")
        newer = make_post(bob, post_type="event", location="elm street north")

        response = client.get("/api/posts", params={"location": "ELM", "postType": "event"})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["posts"]] == [newer.id, older.id]

    def test_list_limit(self, client: TestClient, alice, make_post) -> None:
        for _ in range(3):
            make_post(alice)
        response = client.get("/api/posts", params={"limit": 2})
        assert len(response.json()["posts"]) == 2

    def test_list_rejects_unknown_type(self, client: TestClient) -> None:
        response = client.get("/api/posts", params={"postType": "gossip"})
        assert response.status_code == 400

    def test_user_reaction_requires_token(
        self, client: TestClient, bob, bob_auth, alice_post, post_service
    ) -> None:
        post_service.react(identity_of(bob), alice_post.id, ReactionKind.LIKE)

        anonymous = client.get(f"/api/posts/{alice_post.id}").json()
        as_bob = client.get(f"/api/posts/{alice_post.id}", headers=bob_auth).json()
        stale = client.get(
            f"/api/posts/{alice_post.id}", headers={"Authorization": "Bearer expired"}
        ).json()

        assert anonymous["likes"] == as_bob["likes"] == 1
        assert anonymous["userReaction"] is None
        assert as_bob["userReaction"] == "like"
        assert stale["userReaction"] is None

    def test_detail_includes_replies(
        self, client: TestClient, carol, alice_post, post_service
    ) -> None:
        post_service.reply(identity_of(carol), alice_post.id, "Count me in")

        body = client.get(f"/api/posts/{alice_post.id}").json()

        assert body["replyCount"] == 1
        assert body["replies"][0]["content"] == "Count me in"
        assert body["replies"][0]["author"]["username"] == "carol"
        assert body["replies"][0]["postId"] == alice_post.id

    def test_missing_post(self, client: TestClient) -> None:
        response = client.get("/api/posts/999")
        assert response.status_code == 404
        assert response.json() == {"message": "Post not found"}

    def test_malformed_id(self, client: TestClient) -> None:
        response = client.get("/api/posts/not-a-number")
        assert response.status_code == 400
        assert response.json()["message"] == "Validation Error"


class TestUpdateAndDelete:
    def test_author_updates_post(self, client: TestClient, alice_auth, alice_post) -> None:
        response = client.put(
            f"/api/posts/{alice_post.id}",
            json={"content": "Block party moved to Sunday", "postType": "update"},
            headers=alice_auth,
        )

        assert response.status_code == 200
        post = response.json()["post"]
        assert post["content"] == "Block party moved to Sunday"
        assert post["postType"] == "update"
        assert post["location"] == "Elm Street"

    def test_non_author_cannot_update(self, client: TestClient, bob_auth, alice_post) -> None:
        response = client.put(
            f"/api/posts/{alice_post.id}", json={"content": "mine now"}, headers=bob_auth
        )
        assert response.status_code == 403
        assert response.json() == {"message": "You can only edit your own posts"}

    def test_author_deletes_post(self, client: TestClient, alice_auth, alice_post) -> None:
        response = client.delete(f"/api/posts/{alice_post.id}", headers=alice_auth)

        assert response.status_code == 204
        assert client.get(f"/api/posts/{alice_post.id}").status_code == 404

    def test_non_author_cannot_delete(self, client: TestClient, bob_auth, alice_post) -> None:
        response = client.delete(f"/api/posts/{alice_post.id}", headers=bob_auth)

        assert response.status_code == 403
        assert response.json() == {"message": "You can only delete your own posts"}
        assert client.get(f"/api/posts/{alice_post.id}").status_code == 200

    def test_delete_missing_post(self, client: TestClient, alice_auth) -> None:
        response = client.delete("/api/posts/4040", headers=alice_auth)
        assert response.status_code == 404

    def test_delete_requires_token(self, client: TestClient, alice_post) -> None:
        response = client.delete(f"/api/posts/{alice_post.id}")
        assert response.status_code == 401


class TestReactions:
    def test_toggle_and_switch(self, client: TestClient, bob_auth, alice_post) -> None:
        url = f"/api/posts/{alice_post.id}/reactions"

        liked = client.post(url, json={"type": "like"}, headers=bob_auth).json()
        disliked = client.post(url, json={"type": "dislike"}, headers=bob_auth).json()
        cleared = client.post(url, json={"type": "dislike"}, headers=bob_auth).json()

        assert liked == {"likes": 1, "dislikes": 0, "userReaction": "like"}
        assert disliked == {"likes": 0, "dislikes": 1, "userReaction": "dislike"}
        assert cleared == {"likes": 0, "dislikes": 0, "userReaction": None}

    def test_remove_reaction(self, client: TestClient, bob_auth, alice_post) -> None:
        url = f"/api/posts/{alice_post.id}/reactions"
        client.post(url, json={"type": "like"}, headers=bob_auth)

        first = client.delete(url, headers=bob_auth)
        second = client.delete(url, headers=bob_auth)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json() == {"likes": 0, "dislikes": 0, "userReaction": None}

    def test_rejects_unknown_reaction(self, client: TestClient, bob_auth, alice_post) -> None:
        response = client.post(
            f"/api/posts/{alice_post.id}/reactions", json={"type": "love"}, headers=bob_auth
        )
        assert response.status_code == 400

    def test_requires_token(self, client: TestClient, alice_post) -> None:
        response = client.post(f"/api/posts/{alice_post.id}/reactions", json={"type": "like"})
        assert response.status_code == 401

    def test_missing_post(self, client: TestClient, bob_auth) -> None:
        response = client.post("/api/posts/999/reactions", json={"type": "like"}, headers=bob_auth)
        assert response.status_code == 404


class TestReplies:
    def test_add_and_list(self, client: TestClient, bob_auth, carol_auth, alice_post) -> None:
        url = f"/api/posts/{alice_post.id}/replies"

        created = client.post(url, json={"content": "Count me in"}, headers=carol_auth)
        client.post(url, json={"content": "Bringing lemonade"}, headers=bob_auth)

        assert created.status_code == 201
        assert created.json()["reply"]["content"] == "Count me in"
        listed = client.get(url).json()
        assert [r["content"] for r in listed] == ["Count me in", "Bringing lemonade"]

    def test_rejects_empty_reply(self, client: TestClient, bob_auth, alice_post) -> None:
        response = client.post(
            f"/api/posts/{alice_post.id}/replies", json={"content": "   "}, headers=bob_auth
        )
        assert response.status_code == 400
        assert response.json()["errors"] == ["Reply content is required"]

    def test_reply_to_missing_post(self, client: TestClient, bob_auth) -> None:
        response = client.post("/api/posts/999/replies", json={"content": "hi"}, headers=bob_auth)
        assert response.status_code == 404
