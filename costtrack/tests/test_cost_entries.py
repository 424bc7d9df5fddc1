def test_create_entry_injects_entered_by(client, users, make_project, make_cost_code):
    project = make_project()
    code = make_cost_code()
    response = client.post("/api/cost-entries", json={
        "projectId": project["id"],
        "costCodeId": code["id"],
        "description": "Conduit install, level 2",
        "amount": "1520.75",
        "quantity": "16.5",
        "unitCost": "92.17",
        "entryDate": "2024-03-04T08:00:00Z",
        "enteredBy": "spoofed",
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body["enteredBy"] == users["pm"]
    assert body["amount"] == "1520.75"
    assert body["quantity"] == "16.500"
    assert body["unitCost"] == "92.17"
    assert body["entryDate"] == "2024-03-04T08:00:00"


def test_entry_references_must_exist(client, make_project, make_cost_code):
    project = make_project()
    code = make_cost_code()
    body = {"costCodeId": code["id"], "description": "x", "amount": "1.00", "entryDate": "2024-01-01T00:00:00"}

    response = client.post("/api/cost-entries", json={**body, "projectId": "missing"})
    assert response.status_code == 409
    assert response.get_json()["errors"][0]["field"] == "projectId"

    response = client.post("/api/cost-entries", json={**body, "projectId": project["id"], "costCodeId": "missing"})
    assert response.status_code == 409
    assert response.get_json()["errors"][0]["field"] == "costCodeId"


def test_entry_validation(client, make_project, make_cost_code):
    project = make_project()
    code = make_cost_code()
    body = {"projectId": project["id"], "costCodeId": code["id"], "description": "x", "entryDate": "2024-01-01T00:00:00"}

    assert client.post("/api/cost-entries", json={**body, "amount": 12.5}).status_code == 422
    assert client.post("/api/cost-entries", json={**body, "amount": "abc"}).status_code == 422
    without_date = {k: v for k, v in body.items() if k != "entryDate"}
    assert client.post("/api/cost-entries", json={**without_date, "amount": "1.00"}).status_code == 422


def test_list_entries_newest_first(client, make_project, make_cost_code, make_entry):
    project = make_project()
    other = make_project()
    code = make_cost_code()
    older = make_entry(project["id"], code["id"], "1.00", entry_date="2024-01-01T00:00:00")
    newest = make_entry(project["id"], code["id"], "2.00", entry_date="2024-03-01T00:00:00")
    middle = make_entry(project["id"], code["id"], "3.00", entry_date="2024-02-01T00:00:00")
    make_entry(other["id"], code["id"], "4.00")

    ids = [e["id"] for e in client.get(f"/api/cost-entries?projectId={project['id']}").get_json()]
    assert ids == [newest["id"], middle["id"], older["id"]]

    assert len(client.get("/api/cost-entries").get_json()) == 4


def test_update_and_delete_entry(client, make_project, make_cost_code, make_entry):
    project = make_project()
    code = make_cost_code()
    entry = make_entry(project["id"], code["id"], "100.00")

    response = client.put(f"/api/cost-entries/{entry['id']}", json={"amount": "110.00", "description": "Corrected"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["amount"] == "110.00"
    assert body["description"] == "Corrected"

    assert client.put(f"/api/cost-entries/{entry['id']}", json={"amount": None}).status_code == 422
    assert client.put(f"/api/cost-entries/{entry['id']}", json={"projectId": "missing"}).status_code == 409

    assert client.delete(f"/api/cost-entries/{entry['id']}").status_code == 204
    assert client.get(f"/api/cost-entries/{entry['id']}").status_code == 404
    assert client.delete(f"/api/cost-entries/{entry['id']}").status_code == 404
