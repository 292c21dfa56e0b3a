from .helpers import make_post, make_story


def test_story_listed_on_profile_and_owner_only_edit(client, alice, bob):
    a_id, a_headers = alice
    _, b_headers = bob
    story = make_story(client, a_headers)
    assert story["user"]["_id"] == a_id and story["user"]["name"] == "A"

    profile = client.get("/api/profiles/me", headers=a_headers).json()
    assert [s["_id"] for s in profile["stories"]] == [story["_id"]]
    assert profile["stories"][0]["title"] == "T"

    res = client.put(f"/api/stories/{story['_id']}", json={"text": "hacked"}, headers=b_headers)
    assert res.status_code == 403
    assert client.get(f"/api/stories/{story['_id']}").json()["text"] == "hello"

    res = client.put(f"/api/stories/{story['_id']}", json={"text": "edited"}, headers=a_headers)
    assert res.status_code == 200
    assert res.json()["text"] == "edited" and res.json()["title"] == "T"


def test_story_requires_fields(client, alice):
    _, headers = alice
    res = client.post("/api/stories", json={"title": "T"}, headers=headers)
    assert res.status_code == 422
    assert res.json()["errors"][0]["param"] == "text"


def test_story_creation_needs_token(client):
    assert client.post("/api/stories", json={"title": "T", "text": "x"}).status_code == 401


def test_stories_newest_first(client, alice):
    _, headers = alice
    first = make_story(client, headers, title="first")
    second = make_story(client, headers, title="second")
    listed = client.get("/api/stories").json()
    assert [s["_id"] for s in listed] == [second["_id"], first["_id"]]
    profile = client.get("/api/profiles/me", headers=headers).json()
    assert [s["_id"] for s in profile["stories"]] == [second["_id"], first["_id"]]


def test_unknown_and_malformed_ids(client, alice):
    _, headers = alice
    assert client.get("/api/stories/not-an-id").status_code == 400
    assert client.get("/api/stories/" + "0" * 24).status_code == 404
    assert client.delete("/api/posts/" + "0" * 24, headers=headers).status_code == 404


def test_post_categories(client, alice):
    a_id, headers = alice
    image = make_post(client, headers, "images", description="pic")
    text = make_post(client, headers, "stories", title="S")
    assert image["data"] == {"category": "images", "url": "http://cdn/x", "description": "pic"}
    assert text["data"] == {"category": "stories", "text": "words"}
    assert image["likes"] == [] and image["comments"] == []

    assert [p["_id"] for p in client.get("/api/posts/images").json()] == [image["_id"]]
    assert [p["_id"] for p in client.get("/api/posts/stories").json()] == [text["_id"]]
    assert client.get("/api/posts/videos").json() == []
    assert [p["_id"] for p in client.get("/api/posts").json()] == [text["_id"], image["_id"]]

    profile = client.get(f"/api/profiles/users/{a_id}").json()
    assert [p["_id"] for p in profile["posts"]] == [text["_id"], image["_id"]]


def test_post_validation_per_category(client, alice):
    _, headers = alice
    res = client.post("/api/posts/videos", json={"title": "V"}, headers=headers)
    assert res.status_code == 422 and res.json()["errors"][0]["msg"] == "URL is required"
    res = client.post("/api/posts/stories", json={"title": "S", "url": "http://x"}, headers=headers)
    assert res.status_code == 422 and res.json()["errors"][0]["msg"] == "Text is required"
    res = client.post("/api/posts/audios", json={"url": "http://x"}, headers=headers)
    assert res.status_code == 422 and res.json()["errors"][0]["msg"] == "Title is required"
    assert client.post("/api/posts/podcasts", json={"title": "x"}, headers=headers).status_code == 404


def test_post_update_keeps_category(client, alice, bob):
    _, headers = alice
    post = make_post(client, headers, "audios")
    res = client.put(f"/api/posts/{post['_id']}", json={"text": "nope"}, headers=headers)
    assert res.status_code == 422
    res = client.put(f"/api/posts/{post['_id']}", json={"title": "New", "description": "d"}, headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "New"
    assert body["data"] == {"category": "audios", "url": "http://cdn/x", "description": "d"}

    res = client.put(f"/api/posts/{post['_id']}", json={"title": "Mine"}, headers=bob[1])
    assert res.status_code == 403
    assert client.get(f"/api/posts/{post['_id']}").json()["title"] == "New"


def test_get_post_includes_comments(client, alice, bob):
    _, headers = alice
    post = make_post(client, headers)
    client.post(f"/api/comments/posts/{post['_id']}", json={"text": "nice"}, headers=bob[1])
    got = client.get(f"/api/posts/{post['_id']}").json()
    assert got["user"]["name"] == "A"
    assert [c["text"] for c in got["comments"]] == ["nice"]
    assert got["comments"][0]["user"]["name"] == "B"


def test_profile_upsert_partial(client, alice):
    _, headers = alice
    res = client.put("/api/profiles", json={"bio": "hi", "skills": ["py", "go"]}, headers=headers)
    assert res.status_code == 200
    assert res.json()["bio"] == "hi" and res.json()["skills"] == ["py", "go"]
    res = client.post("/api/profiles", json={"bio": "bye"}, headers=headers)
    assert res.json()["bio"] == "bye" and res.json()["skills"] == ["py", "go"]
    assert res.json()["user"]["name"] == "A"
    assert "email" not in res.json()["user"]

    by_id = client.get(f"/api/profiles/{res.json()['_id']}")
    assert by_id.status_code == 200 and by_id.json()["bio"] == "bye"
    assert len(client.get("/api/profiles").json()) == 1


def test_profile_created_on_first_write_when_missing(client, db, alice):
    user_id, headers = alice
    db["profile"].delete_many({"user": user_id})
    assert client.get("/api/profiles/me", headers=headers).status_code == 404
    res = client.put("/api/profiles", json={"skills": ["x"]}, headers=headers)
    assert res.status_code == 200 and res.json()["skills"] == ["x"]


def test_story_delete_owner_only(client, db, alice, bob):
    a_id, a_headers = alice
    story = make_story(client, a_headers)
    res = client.delete(f"/api/stories/{story['_id']}", headers=bob[1])
    assert res.status_code == 403
    assert res.json() == {"msg": "Not authorized"}
    assert db["story"].find_one({"_id": story["_id"]})["text"] == "hello"
    assert db["profile"].find_one({"user": a_id})["stories"] == [story["_id"]]
