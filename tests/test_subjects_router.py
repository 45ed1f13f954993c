NEW_SUBJECT = {
    "name": "Chemistry",
    "class_level": 9,
    "department": "Science",
    "full_mark": 100,
    "pass_mark": 33,
    "cq_mark": 50,
    "mcq_mark": 25,
    "practical_mark": 25,
}


def test_subject_crud(client):
    res = client.post("/api/sub/addSubject", json=NEW_SUBJECT)
    assert res.status_code == 201
    subject = res.json()["data"]
    assert subject["class"] == 9
    assert subject["department"] == "Science"

    res = client.put(f"/api/sub/updateSubject/{subject['id']}", json={**NEW_SUBJECT, "cq_mark": 60})
    assert res.json()["data"]["cq_mark"] == 60

    res = client.get("/api/sub/getSubjects")
    assert [s["name"] for s in res.json()["data"]] == ["Chemistry"]

    res = client.delete(f"/api/sub/deleteSubject/{subject['id']}")
    assert res.status_code == 200
    assert client.get("/api/sub/getSubjects").json()["data"] == []


def test_update_missing_subject(client):
    res = client.put("/api/sub/updateSubject/999", json=NEW_SUBJECT)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


def test_add_subject_validation_error(client):
    res = client.post("/api/sub/addSubject", json={**NEW_SUBJECT, "cq_mark": -5})
    assert res.status_code == 422
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["message"].startswith("body.cq_mark")
