SECRET = "test-secret"


def signup(client, name, email, password="secret1"):
    """Register through the API; returns (user_id, auth headers)."""
    res = client.post("/api/users", json={"name": name, "email": email, "password": password})
    assert res.status_code == 200, res.text
    body = res.json()
    return body["user"]["_id"], {"x-auth-token": body["token"]}


def make_story(client, headers, title="T", text="hello"):
    res = client.post("/api/stories", json={"title": title, "text": text}, headers=headers)
    assert res.status_code == 200, res.text
    return res.json()


def make_post(client, headers, category="images", **body):
    body.setdefault("title", "P")
    if category == "stories":
        body.setdefault("text", "words")
    else:
        body.setdefault("url", "http://cdn/x")
    res = client.post(f"/api/posts/{category}", json=body, headers=headers)
    assert res.status_code == 200, res.text
    return res.json()
