def test_create_and_list_semesters(client, headers):
    r = client.post("/semesters", json={"semester": "Fall 2023"}, headers=headers)
    assert r.status_code == 201
    assert r.json()["message"] == "Semester created."
    client.post("/semesters", json={"semester": "Spring 2024"}, headers=headers)
    listed = client.get("/semesters", headers=headers)
    assert listed.status_code == 200
    assert sorted(s["semester"] for s in listed.json()["data"]) == ["Fall 2023", "Spring 2024"]


def test_list_without_semesters_is_not_found(client, headers):
    r = client.get("/semesters", headers=headers)
    assert r.status_code == 404
    assert r.json()["message"] == "No semesters found for this user."


def test_search_semesters(client, headers):
    client.post("/semesters", json={"semester": "Fall 2023"}, headers=headers)
    client.post("/semesters", json={"semester": "Spring 2024"}, headers=headers)
    r = client.get("/semesters", params={"search": "Fall"}, headers=headers)
    assert r.status_code == 200
    assert [s["semester"] for s in r.json()["data"]] == ["Fall 2023"]
    missing = client.get("/semesters", params={"search": "Winter"}, headers=headers)
    assert missing.status_code == 404


def test_duplicate_semester_name_per_user(client, register):
    alice, _ = register(username="alice")
    bob, _ = register(username="bob")
    assert client.post("/semesters", json={"semester": "WS24"}, headers=alice).status_code == 201
    dup = client.post("/semesters", json={"semester": "WS24"}, headers=alice)
    assert dup.status_code == 409
    assert dup.json()["error"] == "ConflictError"
    assert client.post("/semesters", json={"semester": "WS24"}, headers=bob).status_code == 201


def test_get_semester_includes_subjects(client, headers):
    sem = client.post("/semesters", json={"semester": "WS24"}, headers=headers).json()["data"]
    client.post("/subjects", json={"name": "Algebra", "semesterId": sem["id"]}, headers=headers)
    r = client.get(f"/semesters/{sem['id']}", headers=headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["semester"] == "WS24"
    assert [s["name"] for s in data["subjects"]] == ["Algebra"]


def test_update_semester(client, headers):
    sem = client.post("/semesters", json={"semester": "WS24"}, headers=headers).json()["data"]
    other = client.post("/semesters", json={"semester": "SS25"}, headers=headers).json()["data"]
    same = client.put(f"/semesters/{sem['id']}", json={"semester": "WS24"}, headers=headers)
    assert same.status_code == 200
    renamed = client.put(f"/semesters/{sem['id']}", json={"semester": "WS 24/25"}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json()["data"]["semester"] == "WS 24/25"
    clash = client.put(f"/semesters/{other['id']}", json={"semester": "WS 24/25"}, headers=headers)
    assert clash.status_code == 409


def test_delete_semester(client, headers):
    sem = client.post("/semesters", json={"semester": "WS24"}, headers=headers).json()["data"]
    r = client.delete(f"/semesters/{sem['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["semester"] == "WS24"
    again = client.delete(f"/semesters/{sem['id']}", headers=headers)
    assert again.status_code == 404


def test_missing_semester_is_not_found(client, headers):
    assert client.get("/semesters/nope", headers=headers).status_code == 404
    assert client.put("/semesters/nope", json={"semester": "x"}, headers=headers).status_code == 404
    assert client.delete("/semesters/nope", headers=headers).status_code == 404


def test_other_users_semester_is_hidden(client, register):
    alice, _ = register(username="alice")
    bob, _ = register(username="bob")
    sem = client.post("/semesters", json={"semester": "WS24"}, headers=alice).json()["data"]
    assert client.get(f"/semesters/{sem['id']}", headers=bob).status_code == 404
    assert client.delete(f"/semesters/{sem['id']}", headers=bob).status_code == 404
    assert client.get(f"/semesters/{sem['id']}", headers=alice).status_code == 200


def test_empty_semester_name_is_invalid(client, headers):
    r = client.post("/semesters", json={"semester": ""}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "InvalidError"


def test_search_treats_wildcards_literally(client, headers):
    client.post("/semesters", json={"semester": "Fall 2023"}, headers=headers)
    for term in ("_", "%"):
        r = client.get("/semesters", params={"search": term}, headers=headers)
        assert r.status_code == 404, term
        assert r.json()["message"] == "No semesters found for this user or this search term."
    client.post("/semesters", json={"semester": "WS_24"}, headers=headers)
    r = client.get("/semesters", params={"search": "_"}, headers=headers)
    assert [s["semester"] for s in r.json()["data"]] == ["WS_24"]
