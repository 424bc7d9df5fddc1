from decimal import Decimal

import pytest

from costtrack.errors import NotFoundError
from costtrack.services.cost_calculation_service import CostCalculationService


def _summary(client, project_id):
    response = client.get(f"/api/projects/{project_id}/cost-summary")
    assert response.status_code == 200, response.get_json()
    return response.get_json()


def test_budget_and_two_categories(client, make_project, make_cost_code, make_entry):
    project = make_project(budget="10000.00")
    labor = make_cost_code("labor")
    materials = make_cost_code("materials")
    make_entry(project["id"], labor["id"], "4000.00")
    make_entry(project["id"], materials["id"], "3000.00")

    summary = _summary(client, project["id"])
    assert summary["totalCost"] == "7000.00"
    assert summary["costByCategory"] == {"labor": "4000.00", "materials": "3000.00"}
    assert summary["budgetVariance"] == "3000.00"


def test_no_entries(client, make_project):
    project = make_project(budget="10000.00")
    summary = _summary(client, project["id"])
    assert summary["totalCost"] == "0.00"
    assert summary["costByCategory"] == {}
    assert summary["budgetVariance"] == "10000.00"


def test_sums_are_exact(client, make_project, make_cost_code, make_entry):
    project = make_project(budget="1.00")
    code = make_cost_code("equipment")
    for _ in range(10):
        make_entry(project["id"], code["id"], "0.10")

    summary = _summary(client, project["id"])
    assert summary["totalCost"] == "1.00"
    assert summary["budgetVariance"] == "0.00"


def test_over_budget_is_negative(client, make_project, make_cost_code, make_entry):
    project = make_project(budget="100.00")
    code = make_cost_code("subcontractors")
    make_entry(project["id"], code["id"], "150.25")

    assert _summary(client, project["id"])["budgetVariance"] == "-50.25"


def test_categories_add_up_to_total(client, make_project, make_cost_code, make_entry):
    project = make_project(budget="50000.00")
    other = make_project()
    amounts = {
        "labor": ["1234.56", "0.01", "999.99"],
        "materials": ["18.20", "7.35"],
        "equipment": ["450.00"],
        "subcontractors": ["12000.10", "0.90"],
    }
    for category, values in amounts.items():
        code = make_cost_code(category)
        for value in values:
            make_entry(project["id"], code["id"], value)
        make_entry(other["id"], code["id"], "1.00")

    summary = _summary(client, project["id"])
    expected_total = sum(Decimal(v) for values in amounts.values() for v in values)
    by_category = {k: Decimal(v) for k, v in summary["costByCategory"].items()}

    assert Decimal(summary["totalCost"]) == expected_total
    assert sum(by_category.values()) == expected_total
    assert by_category["labor"] == Decimal("2234.56")
    assert Decimal(summary["budgetVariance"]) == Decimal("50000.00") - expected_total


def test_summary_follows_changes(client, make_project, make_cost_code, make_entry):
    project = make_project(budget="500.00")
    code = make_cost_code("labor")
    entry = make_entry(project["id"], code["id"], "200.00")

    client.put(f"/api/cost-entries/{entry['id']}", json={"amount": "250.00"})
    assert _summary(client, project["id"])["totalCost"] == "250.00"

    client.put(f"/api/projects/{project['id']}", json={"budget": "1000.00"})
    assert _summary(client, project["id"])["budgetVariance"] == "750.00"

    client.delete(f"/api/cost-entries/{entry['id']}")
    assert _summary(client, project["id"])["costByCategory"] == {}


def test_missing_project(client, db_session):
    response = client.get("/api/projects/missing/cost-summary")
    assert response.status_code == 404

    with pytest.raises(NotFoundError):
        CostCalculationService(db_session).get_project_cost_summary("missing")


def test_summary_requires_session(anon_client):
    assert anon_client.get("/api/projects/any/cost-summary").status_code == 401
