import pytest


def _post(client, user, content="", files=None):
    return client.post("/posts", data={"content": content}, files=files, headers=user["headers"])


def test_create_post_round_trip(client, alice):
    resp = _post(client, alice, "  Hello LinkedIn!  ")
    assert resp.status_code == 201
    created = resp.json()
    assert created["content"] == "Hello LinkedIn!"
    assert created["name"] == "Alice Smith"

    posts = client.get("/posts").json()
    assert [p["id"] for p in posts] == [created["id"]]
    assert posts[0]["content"] == "Hello LinkedIn!"
    assert posts[0]["name"] == "Alice Smith"
    assert {"id", "name", "content", "created_at"} <= set(posts[0])


def test_create_post_requires_token(client):
    resp = client.post("/posts", data={"content": "hi"})
    assert resp.status_code == 401


def test_create_post_rejects_bad_token(client):
    resp = client.post("/posts", data={"content": "hi"}, headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


def test_empty_post_is_rejected(client, alice):
    resp = _post(client, alice, "   ")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please enter some text or attach media to post."


def test_post_length_is_capped(client, alice):
    assert _post(client, alice, "x" * 300).status_code == 201
    resp = _post(client, alice, "x" * 301)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Post content cannot exceed 300 characters."


def test_media_post_is_stored_and_served(client, alice):
    files = {"media": ("cat.PNG", b"\x89PNG fake image", "image/png")}
    resp = _post(client, alice, "", files=files)
    assert resp.status_code == 201
    post = resp.json()
    assert post["media_type"] == "image/png"
    assert post["media_url"].startswith("/uploads/")
    assert post["media_url"].endswith(".png")

    served = client.get(post["media_url"])
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake image"


def test_non_media_upload_is_rejected(client, alice):
    files = {"media": ("doc.pdf", b"%PDF-1.4", "application/pdf")}
    resp = _post(client, alice, "see attached", files=files)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please select an image or video file only."
    assert client.get("/posts").json() == []


def test_get_single_post(client, alice):
    post = _post(client, alice, "one").json()
    assert client.get(f"/posts/{post['id']}").json()["content"] == "one"
    assert client.get("/posts/missing").status_code == 404


def test_posts_count_tracks_creation_and_deletion(client, alice):
    post = _post(client, alice, "counting").json()
    assert client.get("/auth/me", headers=alice["headers"]).json()["posts_count"] == 1

    assert client.delete(f"/posts/{post['id']}", headers=alice["headers"]).status_code == 200
    assert client.get("/auth/me", headers=alice["headers"]).json()["posts_count"] == 0
    assert client.get(f"/posts/{post['id']}").status_code == 404


def test_only_author_can_delete(client, alice, bob):
    post = _post(client, alice, "mine").json()
    resp = client.delete(f"/posts/{post['id']}", headers=bob["headers"])
    assert resp.status_code == 403


def test_delete_removes_media_file(client, alice, settings):
    files = {"media": ("clip.mp4", b"fake video", "video/mp4")}
    post = _post(client, alice, "clip", files=files).json()
    stored = settings.uploads_dir / post["media_url"].rsplit("/", 1)[1]
    assert stored.exists()

    client.delete(f"/posts/{post['id']}", headers=alice["headers"])
    assert not stored.exists()


def test_like_toggle(client, alice, bob):
    post = _post(client, alice, "like me").json()

    assert client.post(f"/posts/{post['id']}/like", headers=bob["headers"]).json() == {"liked": True}
    seen_by_bob = client.get(f"/posts/{post['id']}", headers=bob["headers"]).json()
    assert seen_by_bob["likes_count"] == 1
    assert seen_by_bob["is_liked"] is True
    assert client.get(f"/posts/{post['id']}").json()["is_liked"] is False

    assert client.post(f"/posts/{post['id']}/like", headers=bob["headers"]).json() == {"liked": False}
    assert client.get(f"/posts/{post['id']}").json()["likes_count"] == 0


def test_like_unknown_post(client, bob):
    assert client.post("/posts/missing/like", headers=bob["headers"]).status_code == 404


def test_feed_pagination(client, alice):
    for i in range(3):
        _post(client, alice, f"post {i}")
    assert len(client.get("/posts", params={"limit": 2}).json()) == 2
    assert len(client.get("/posts", params={"limit": 2, "offset": 2}).json()) == 1


@pytest.mark.parametrize("params", [{"offset": -1}, {"limit": 0}, {"limit": 1000}])
def test_feed_paging_is_bounded(client, params):
    assert client.get("/posts", params=params).status_code == 422
