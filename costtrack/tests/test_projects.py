from costtrack.db.session import get_session
from costtrack.models.change_order import ChangeOrder
from costtrack.models.cost_entry import CostEntry
from costtrack.models.project import Project


def test_create_project_injects_creator(client, users):
    response = client.post("/api/projects", json={
        "name": "Data center feeders",
        "projectNumber": "DC-001",
        "budget": "250000.50",
        "projectType": "industrial",
        "startDate": "2024-01-15T00:00:00",
        "createdBy": "someone-else",
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body["createdBy"] == users["pm"]
    assert body["budget"] == "250000.50"
    assert body["status"] == "active"
    assert body["projectType"] == "industrial"


def test_create_project_validation(client):
    base = {"name": "Lighting retrofit", "projectNumber": "LR-1", "budget": "100.00", "projectType": "residential"}

    # JSON floats are not accepted for money
    response = client.post("/api/projects", json={**base, "budget": 100.10})
    assert response.status_code == 422
    assert response.get_json()["errors"][0]["field"] == "budget"

    response = client.post("/api/projects", json={**base, "budget": "-1.00"})
    assert response.status_code == 422

    response = client.post("/api/projects", json={**base, "budget": "1.005"})
    assert response.status_code == 422

    response = client.post("/api/projects", json={**base, "projectType": "municipal"})
    assert response.status_code == 422

    response = client.post("/api/projects", json={**base, "color": "red"})
    assert response.status_code == 422
    assert response.get_json()["errors"][0]["field"] == "color"

    response = client.post("/api/projects", json={
        **base, "startDate": "2024-05-01T00:00:00", "endDate": "2024-04-01T00:00:00",
    })
    assert response.status_code == 422

    response = client.post("/api/projects", json=["not", "an", "object"])
    assert response.status_code == 400

    assert client.get("/api/projects").get_json() == []


def test_duplicate_project_number(client, make_project):
    make_project(projectNumber="DUP-1")
    response = client.post("/api/projects", json={
        "name": "Other", "projectNumber": "DUP-1", "budget": "1.00", "projectType": "commercial",
    })
    assert response.status_code == 409
    assert response.get_json()["errorType"] == "INTEGRITY_ERROR"


def test_list_projects_newest_first(client, make_project):
    first = make_project()
    second = make_project()
    third = make_project()

    ids = [p["id"] for p in client.get("/api/projects").get_json()]
    assert ids == [third["id"], second["id"], first["id"]]


def test_get_project(client, make_project):
    project = make_project()
    response = client.get(f"/api/projects/{project['id']}")
    assert response.status_code == 200
    assert response.get_json() == project

    response = client.get("/api/projects/does-not-exist")
    assert response.status_code == 404
    assert response.get_json()["errorType"] == "NOT_FOUND"


def test_update_project_partial(client, make_project):
    project = make_project(description="Phase 1")

    response = client.put(f"/api/projects/{project['id']}", json={"budget": "12500.00", "status": "completed"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["budget"] == "12500.00"
    assert body["status"] == "completed"
    # untouched fields keep their value
    assert body["name"] == project["name"]
    assert body["description"] == "Phase 1"

    # nullable field can be cleared, required ones cannot
    response = client.put(f"/api/projects/{project['id']}", json={"description": None})
    assert response.status_code == 200
    assert response.get_json()["description"] is None

    assert client.put(f"/api/projects/{project['id']}", json={"name": None}).status_code == 422
    assert client.put(f"/api/projects/{project['id']}", json={"createdBy": "x"}).status_code == 422
    assert client.put("/api/projects/missing", json={"name": "x"}).status_code == 404


def test_update_project_dates_checked_against_stored_values(client, make_project):
    project = make_project(startDate="2024-06-01T00:00:00")
    response = client.put(f"/api/projects/{project['id']}", json={"endDate": "2024-05-01T00:00:00"})
    assert response.status_code == 422
    assert response.get_json()["errors"][0]["field"] == "endDate"


def test_delete_project_cascades(client, make_project, make_cost_code, make_entry):
    project = make_project()
    other = make_project()
    code = make_cost_code()
    make_entry(project["id"], code["id"], "4000.00")
    make_entry(project["id"], code["id"], "3000.00")
    kept = make_entry(other["id"], code["id"], "50.00")
    response = client.post("/api/change-orders", json={
        "projectId": project["id"], "changeOrderNumber": "CO-1", "description": "Extra panel", "amount": "900.00",
    })
    assert response.status_code == 201

    assert client.delete(f"/api/projects/{project['id']}").status_code == 204
    assert client.get(f"/api/projects/{project['id']}").status_code == 404
    assert client.get(f"/api/cost-entries?projectId={project['id']}").get_json() == []
    assert client.get(f"/api/change-orders?projectId={project['id']}").get_json() == []

    remaining = client.get("/api/cost-entries").get_json()
    assert [e["id"] for e in remaining] == [kept["id"]]

    assert client.delete(f"/api/projects/{project['id']}").status_code == 404


def test_foreign_key_cascade_in_database(client, make_project, make_cost_code, make_entry):
    project = make_project()
    code = make_cost_code()
    make_entry(project["id"], code["id"], "10.00")

    # a raw delete, bypassing the service, still takes the children with it
    db = get_session()
    try:
        db.query(Project).filter(Project.id == project["id"]).delete(synchronize_session=False)
        db.commit()
        assert db.query(CostEntry).count() == 0
        assert db.query(ChangeOrder).count() == 0
    finally:
        db.close()
