import pytest

JOHN = {"name": "John Doe", "email": "john@doe.com", "password": "password"}
ITEM = {"title": "Buy groceries", "description": "Buy milk, eggs, and bread"}


@pytest.fixture
def logged_in(client):
    response = client.post("/register", json=JOHN)
    assert response.status_code == 201, response.text
    return client


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_register_sets_both_cookies(client):
    response = client.post("/register", json=JOHN)
    assert response.status_code == 201
    assert response.json() == {"message": "successfully registered"}
    assert response.cookies.get("Authorization")
    assert response.cookies.get("refreshToken")
    set_cookie = response.headers.get_list("set-cookie")
    assert all("httponly" in header.lower() for header in set_cookie)
    assert all("samesite=lax" in header.lower() for header in set_cookie)


def test_register_failure_sets_no_cookie(client):
    response = client.post("/register", json={"name": "John Doe"})
    assert response.status_code == 400
    assert "message" in response.json()
    assert "set-cookie" not in response.headers


def test_malformed_json_is_a_bad_request(client):
    response = client.post("/register", content=b"{not json", headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert "message" in response.json()


def test_login_and_refresh_flow(client, clock):
    registered = client.post("/register", json=JOHN)
    old_refresh = registered.cookies["refreshToken"]
    clock.advance(seconds=5)

    login = client.post("/login", json={"email": "john@doe.com", "password": "password"})
    assert login.status_code == 200
    assert login.json() == {"message": "successfully login"}
    new_refresh = login.cookies["refreshToken"]
    assert new_refresh != old_refresh

    client.cookies.clear()
    client.cookies.set("refreshToken", old_refresh)
    stale = client.post("/refresh-token")
    assert stale.status_code == 400
    assert stale.json() == {"message": "cannot find user by refresh token"}

    client.cookies.clear()
    client.cookies.set("refreshToken", new_refresh)
    refreshed = client.post("/refresh-token")
    assert refreshed.status_code == 200
    assert refreshed.json() == {"message": "successfully refresh token"}
    assert refreshed.cookies.get("Authorization")
    assert refreshed.cookies.get("refreshToken") is None


def test_immediate_login_invalidates_registration_refresh_cookie(client):
    old_refresh = client.post("/register", json=JOHN).cookies["refreshToken"]
    client.post("/login", json={"email": "john@doe.com", "password": "password"})

    client.cookies.clear()
    client.cookies.set("refreshToken", old_refresh)
    assert client.post("/refresh-token").status_code == 400


def test_login_with_wrong_password(logged_in):
    response = logged_in.post("/login", json={"email": "john@doe.com", "password": "wrong"})
    assert response.status_code == 400
    assert response.json() == {"message": "wrong email or password"}


def test_refresh_without_cookie(client):
    response = client.post("/refresh-token")
    assert response.status_code == 404
    assert response.json() == {"message": "cookie not found"}


def test_refresh_with_invalid_token(client):
    client.cookies.set("refreshToken", "garbage")
    assert client.post("/refresh-token").status_code == 401


def test_todos_require_access_cookie(client):
    response = client.get("/todos", params={"page": 1, "limit": 10})
    assert response.status_code == 401
    assert response.json() == {"message": "token not found"}


def test_todos_reject_invalid_access_cookie(client):
    client.cookies.set("Authorization", "garbage")
    response = client.post("/todos", json=ITEM)
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


def test_expired_access_cookie(logged_in, clock):
    clock.advance(minutes=15)
    assert logged_in.post("/todos", json=ITEM).status_code == 401


def test_todo_crud(logged_in):
    created = logged_in.post("/todos", json=ITEM)
    assert created.status_code == 201
    todo_id = created.json()["id"]
    assert created.json() == {"id": todo_id, **ITEM}

    updated = logged_in.put(f"/todos/{todo_id}", json={"title": "Buy groceries", "description": "Buy milk"})
    assert updated.status_code == 200
    assert updated.json()["description"] == "Buy milk"

    listed = logged_in.get("/todos", params={"page": 1, "limit": 10})
    assert listed.status_code == 200
    assert listed.json() == {
        "data": [{"id": todo_id, "title": "Buy groceries", "description": "Buy milk"}],
        "page": 1,
        "limit": 10,
        "total": 1,
    }

    deleted = logged_in.delete(f"/todos/{todo_id}")
    assert deleted.status_code == 204
    assert deleted.content == b""

    assert logged_in.get("/todos", params={"page": 1, "limit": 10}).status_code == 404


def test_other_users_todo_is_forbidden(client):
    client.post("/register", json=JOHN)
    todo_id = client.post("/todos", json=ITEM).json()["id"]

    client.cookies.clear()
    client.post("/register", json={"name": "Jane Doe", "email": "jane@doe.com", "password": "password"})
    response = client.put(f"/todos/{todo_id}", json=ITEM)
    assert response.status_code == 403
    assert response.json() == {"message": "forbidden"}
    assert client.delete(f"/todos/{todo_id}").status_code == 403


@pytest.mark.parametrize(
    "method, path",
    [("put", "/todos/abc"), ("delete", "/todos/abc"), ("get", "/todos?page=x&limit=10"), ("get", "/todos")],
)
def test_bad_path_and_query_values(logged_in, method, path):
    kwargs = {"json": ITEM} if method == "put" else {}
    response = getattr(logged_in, method)(path, **kwargs)
    assert response.status_code == 400
    assert "message" in response.json()
