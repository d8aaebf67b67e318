"""End-to-end flows over HTTP."""
from conftest import SAMPLE_MOOD

MOOD = SAMPLE_MOOD.model_dump()


async def test_requires_auth(client):
    response = await client.get("/api/v1/feed")
    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated", "kind": "NOT_AUTHENTICATED", "retryable": False}


async def test_invalid_token(client):
    response = await client.get("/api/v1/feed", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["kind"] == "INVALID_TOKEN"


async def test_health(client):
    assert (await client.get("/health")).json() == {"status": "ok"}


async def test_friend_flow(client, make_profile, auth_headers):
    alice = await make_profile("Alice")
    bob = await make_profile("Bob")

    sent = await client.post(f"/api/v1/friends/requests/{bob.id}", headers=auth_headers(alice))
    assert sent.json() == {"status": "SENT"}

    requests = (await client.get("/api/v1/friends/requests", headers=auth_headers(bob))).json()
    assert [p["id"] for p in requests["incoming"]] == [str(alice.id)]

    accepted = await client.post(f"/api/v1/friends/requests/{alice.id}/accept", headers=auth_headers(bob))
    assert accepted.json() == {"changed": True}

    again = await client.post(f"/api/v1/friends/requests/{bob.id}", headers=auth_headers(alice))
    assert again.json() == {"status": "ALREADY_FRIENDS"}

    me = (await client.get("/api/v1/users/me", headers=auth_headers(alice))).json()
    assert me["friends"] == [str(bob.id)]
    assert me["outgoing_requests"] == []

    removed = await client.delete(f"/api/v1/friends/{alice.id}", headers=auth_headers(bob))
    assert removed.json() == {"changed": True}
    assert (await client.get("/api/v1/friends", headers=auth_headers(alice))).json() == []


async def test_self_request_is_rejected(client, make_profile, auth_headers):
    alice = await make_profile("Alice")
    response = await client.post(f"/api/v1/friends/requests/{alice.id}", headers=auth_headers(alice))
    assert response.status_code == 400


async def test_accept_without_request(client, make_profile, auth_headers):
    alice = await make_profile("Alice")
    bob = await make_profile("Bob")
    response = await client.post(f"/api/v1/friends/requests/{alice.id}/accept", headers=auth_headers(bob))
    assert response.status_code == 404
    assert response.json()["kind"] == "REQUEST_NOT_FOUND"


async def test_post_like_comment(client, make_profile, auth_headers):
    alice = await make_profile("Alice", private=False)
    bob = await make_profile("Bob")

    created = await client.post(
        "/api/v1/posts",
        json={"image_src": "https://img.example/a.jpg", "mood": MOOD},
        headers=auth_headers(alice),
    )
    assert created.status_code == 201
    post = created.json()
    assert post["user_snapshot"]["name"] == "Alice"
    assert post["region"] == "EU"
    assert post["likes"] == []

    like = await client.post(f"/api/v1/posts/{post['id']}/like", headers=auth_headers(bob))
    assert like.json() == {"post_id": post["id"], "liked": True, "likes_count": 1}

    comment = await client.post(
        f"/api/v1/posts/{post['id']}/comments", json={"text": "iconic"}, headers=auth_headers(bob)
    )
    assert comment.status_code == 201
    assert comment.json()["username"] == "Bob"

    seen = (await client.get(f"/api/v1/posts/{post['id']}", headers=auth_headers(bob))).json()
    assert seen["is_liked"] is True
    assert seen["likes"] == [str(bob.id)]
    assert [c["text"] for c in seen["comments"]] == ["iconic"]

    unlike = await client.post(f"/api/v1/posts/{post['id']}/like", headers=auth_headers(bob))
    assert unlike.json()["liked"] is False
    assert unlike.json()["likes_count"] == 0


async def test_feed_scopes(client, make_profile, make_post, auth_headers):
    viewer = await make_profile("Viewer", region="US")
    public_eu = await make_profile("Public EU", region="EU", private=False)
    public_us = await make_profile("Public US", region="US", private=False)
    await make_post(public_eu)
    await make_post(public_us)

    async def authors(scope):
        response = await client.get("/api/v1/feed", params={"scope": scope}, headers=auth_headers(viewer))
        assert response.status_code == 200
        return {p["user_id"] for p in response.json()}

    assert await authors("FRIENDS") == set()
    assert await authors("EUROPE") == {str(public_eu.id)}
    assert await authors("GLOBAL") == {str(public_eu.id), str(public_us.id)}


async def test_feed_rejects_unknown_scope(client, make_profile, auth_headers):
    viewer = await make_profile("Viewer")
    response = await client.get("/api/v1/feed", params={"scope": "MARS"}, headers=auth_headers(viewer))
    assert response.status_code == 422


async def test_hidden_post_is_not_found(client, make_profile, make_post, auth_headers):
    author = await make_profile("Private Pat")
    stranger = await make_profile("Stranger")
    post = await make_post(author)
    response = await client.get(f"/api/v1/posts/{post.id}", headers=auth_headers(stranger))
    assert response.status_code == 404
    assert response.json()["kind"] == "POST_NOT_FOUND"


async def test_privacy_setting_applies_to_new_posts_only(client, make_profile, auth_headers):
    author = await make_profile("Pat", region="EU", private=False)
    stranger = await make_profile("Stranger")

    async def post_selfie(src):
        response = await client.post(
            "/api/v1/posts", json={"image_src": src, "mood": MOOD}, headers=auth_headers(author)
        )
        return response.json()["id"]

    async def global_feed():
        response = await client.get("/api/v1/feed", params={"scope": "GLOBAL"}, headers=auth_headers(stranger))
        return [p["id"] for p in response.json()]

    before = await post_selfie("https://img.example/before.jpg")
    assert await global_feed() == [before]

    updated = await client.put(
        "/api/v1/users/me/settings",
        json={"theme": "light", "language": "de", "private_account": True},
        headers=auth_headers(author),
    )
    assert updated.json()["settings"]["private_account"] is True

    await post_selfie("https://img.example/after.jpg")
    assert await global_feed() == [before]


async def test_hidden_post_cannot_be_liked_or_commented(client, make_profile, make_post, auth_headers):
    author = await make_profile("Private Pat")
    stranger = await make_profile("Stranger")
    post = await make_post(author)

    like = await client.post(f"/api/v1/posts/{post.id}/like", headers=auth_headers(stranger))
    assert like.status_code == 404
    assert like.json()["kind"] == "POST_NOT_FOUND"

    comment = await client.post(
        f"/api/v1/posts/{post.id}/comments", json={"text": "found you"}, headers=auth_headers(stranger)
    )
    assert comment.status_code == 404

    seen = (await client.get(f"/api/v1/posts/{post.id}", headers=auth_headers(author))).json()
    assert seen["likes"] == []
    assert seen["comments"] == []


async def test_search(client, make_profile, auth_headers):
    me = await make_profile("Searcher")
    await make_profile("Nora Berg")
    await make_profile("Noah")
    await make_profile("Someone Else")
    response = await client.get("/api/v1/users/search", params={"q": "no"}, headers=auth_headers(me))
    assert sorted(p["name"] for p in response.json()) == ["Noah", "Nora Berg"]


async def test_messages(client, make_profile, auth_headers):
    alice = await make_profile("Alice")
    bob = await make_profile("Bob")

    sent = await client.post(f"/api/v1/messages/{bob.id}", json={"content": "hi bob"}, headers=auth_headers(alice))
    assert sent.status_code == 201
    first = sent.json()
    await client.post(f"/api/v1/messages/{alice.id}", json={"content": "hey"}, headers=auth_headers(bob))

    history = (await client.get(f"/api/v1/messages/{alice.id}", headers=auth_headers(bob))).json()
    assert [m["content"] for m in history] == ["hi bob", "hey"]

    newer = await client.get(
        f"/api/v1/messages/{alice.id}", params={"since": first["created_at"]}, headers=auth_headers(bob)
    )
    assert [m["content"] for m in newer.json()] == ["hey"]

    empty = await client.post(f"/api/v1/messages/{bob.id}", json={"content": ""}, headers=auth_headers(alice))
    assert empty.status_code == 400
    assert empty.json()["kind"] == "EMPTY_MESSAGE"


async def test_mood_scoring(client, make_profile, auth_headers, scorer):
    me = await make_profile("Selfie Taker")
    response = await client.post(
        "/api/v1/mood",
        files={"file": ("selfie.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")},
        headers=auth_headers(me),
    )
    assert response.status_code == 200
    assert response.json() == MOOD
    assert scorer.calls == [(b"\xff\xd8fake-jpeg", "image/jpeg")]


async def test_mood_rejects_non_image(client, make_profile, auth_headers, scorer):
    me = await make_profile("Selfie Taker")
    response = await client.post(
        "/api/v1/mood",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers(me),
    )
    assert response.status_code == 400
    assert response.json()["kind"] == "INVALID_FILE_TYPE"
    assert scorer.calls == []


async def test_selfie_upload(client, make_profile, auth_headers):
    me = await make_profile("Selfie Taker")
    response = await client.post(
        "/api/v1/uploads/selfie",
        files={"file": ("selfie.png", b"\x89PNG-data", "image/png")},
        headers=auth_headers(me),
    )
    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith(f"http://testserver/uploads/users/{me.id}/selfies/")
    assert url.endswith(".png")

    served = await client.get(url)
    assert served.content == b"\x89PNG-data"
