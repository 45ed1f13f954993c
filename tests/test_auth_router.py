from utils.security import create_refresh_token


def test_login(client, teacher):
    res = client.post("/api/auth/teacher/login", json={"username": "rahima", "password": "secret123"})
    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"] and body["refresh_token"]


def test_login_wrong_password(client, teacher):
    res = client.post("/api/auth/teacher/login", json={"username": "rahima", "password": "nope"})
    assert res.status_code == 401
    assert res.json()["error"] == {"code": "UNAUTHORIZED", "message": "Invalid username or password"}


def test_login_disabled_account(client, db, teacher):
    teacher.available = False
    db.commit()
    res = client.post("/api/auth/teacher/login", json={"username": "rahima", "password": "secret123"})
    assert res.status_code == 403


def test_refresh_rotates_pair(client, teacher):
    refresh_token = create_refresh_token(teacher.id)
    res = client.post("/api/auth/teacher/refresh", json={"refresh_token": refresh_token})
    assert res.status_code == 200
    assert res.json()["refresh_token"] != refresh_token


def test_refresh_rejects_access_token(client, auth_headers):
    access_token = auth_headers["Authorization"].split(" ", 1)[1]
    res = client.post("/api/auth/teacher/refresh", json={"refresh_token": access_token})
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Invalid token type"


def test_profile(client, auth_headers):
    res = client.get("/api/auth/teacher/profile", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["username"] == "rahima"
    assert data["levels"] == [{"class_name": 8, "section": "A"}, {"class_name": 10, "section": "A"}]


def test_profile_requires_bearer(client, teacher):
    res = client.get("/api/auth/teacher/profile")
    assert res.status_code == 401
    assert res.headers["WWW-Authenticate"] == "Bearer"

    res = client.get("/api/auth/teacher/profile", headers={"Authorization": "Basic abc"})
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Invalid auth scheme"
