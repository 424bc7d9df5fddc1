import io
from decimal import Decimal

from openpyxl import load_workbook

from costtrack.models.project import Project
from costtrack.services.cost_calculation_service import CostCalculationService


def _project_with_costs(make_project, make_cost_code, make_entry):
    project = make_project(budget="10000.00", projectNumber="EL 2024/07")
    labor = make_cost_code("labor")
    materials = make_cost_code("materials")
    make_entry(project["id"], labor["id"], "4000.00", description="Rough-in", quantity="40", unitCost="100.00")
    make_entry(project["id"], materials["id"], "3000.00", description="Switchgear")
    return project


def test_csv_report(client, make_project, make_cost_code, make_entry):
    project = _project_with_costs(make_project, make_cost_code, make_entry)

    response = client.get(f"/api/projects/{project['id']}/cost-report?format=csv")
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "EL_2024_07_cost_report.csv" in response.headers["Content-Disposition"]

    text = response.get_data(as_text=True)
    assert text.startswith("Project Cost Report")
    assert "Rough-in" in text
    assert "Pat Morgan" in text
    assert "labor,4000.00" in text
    assert "Total Cost,7000.00" in text
    assert "Budget,10000.00" in text
    assert "Budget Variance,3000.00" in text


def test_xlsx_report(client, make_project, make_cost_code, make_entry):
    project = _project_with_costs(make_project, make_cost_code, make_entry)

    response = client.get(f"/api/projects/{project['id']}/cost-report")
    assert response.status_code == 200
    assert response.mimetype.endswith("spreadsheetml.sheet")

    sheet = load_workbook(io.BytesIO(response.data)).active
    assert sheet.title == "Cost Report"
    assert sheet["A1"].value == "Project Cost Report"

    totals = {row[0]: row[1] for row in sheet.iter_rows(values_only=True) if row[0] in ("Total Cost", "Budget Variance")}
    assert float(totals["Total Cost"]) == 7000.0
    assert float(totals["Budget Variance"]) == 3000.0


def test_report_errors(client, make_project):
    project = make_project()
    assert client.get(f"/api/projects/{project['id']}/cost-report?format=pdf").status_code == 422
    assert client.get("/api/projects/missing/cost-report?format=csv").status_code == 404


def test_report_frame_from_loaded_project(client, db_session, make_project, make_cost_code, make_entry):
    project = _project_with_costs(make_project, make_cost_code, make_entry)

    loaded = db_session.get(Project, project["id"])
    df = CostCalculationService(db_session).generate_df_report(loaded)

    assert df.iloc[0, 0] == "Project Cost Report"
    assert df.iloc[1].tolist()[:2] == ["Project Number", "EL 2024/07"]
    totals = {row[0]: row[1] for row in df.itertuples(index=False) if row[0] in ("Total Cost", "Budget")}
    assert totals == {"Total Cost": Decimal("7000.00"), "Budget": Decimal("10000.00")}
