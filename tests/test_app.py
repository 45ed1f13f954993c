def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert int(res.headers["X-Latency-Ms"]) >= 0


def test_unknown_route_uses_error_envelope(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["generated_at"]
