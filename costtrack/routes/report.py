# costtrack/routes/report.py
import io
import re

import pandas as pd
from flask import Blueprint, jsonify, request, send_file

from costtrack.db.session import get_session
from costtrack.errors import InputError, NotFoundError
from costtrack.models.project import Project
from costtrack.routes.gate import require_login
from costtrack.services.cost_calculation_service import CostCalculationService

report_bp = Blueprint('report', __name__, url_prefix='/api/projects/<project_id>')
report_bp.before_request(require_login)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _safe_filename(text: str) -> str:
    return re.sub(r'[^A-Za-z0-9._-]+', '_', text).strip('_') or 'project'


@report_bp.route('/cost-summary', methods=['GET'])
def cost_summary(project_id):
    """{totalCost, costByCategory, budgetVariance} for one project."""
    db = get_session()
    try:
        summary = CostCalculationService(db).get_project_cost_summary(project_id)
        return jsonify(summary.to_json())
    finally:
        db.close()


@report_bp.route('/cost-report', methods=['GET'])
def export_cost_report(project_id):
    """Download the project cost report as xlsx (default) or csv."""
    export_format = request.args.get('format', 'xlsx').strip().lower()
    if export_format not in ('xlsx', 'csv'):
        raise InputError("format must be 'xlsx' or 'csv'", field="format")

    db = get_session()
    try:
        project = db.get(Project, project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}")

        df = CostCalculationService(db).generate_df_report(project)
        filename = f"{_safe_filename(project.project_number)}_cost_report.{export_format}"
    finally:
        db.close()

    output = io.BytesIO()
    if export_format == 'csv':
        output.write(df.to_csv(index=False, header=False).encode('utf-8'))
        mimetype = 'text/csv'
    else:
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, header=False, sheet_name='Cost Report')
        mimetype = XLSX_MIMETYPE
    output.seek(0)

    return send_file(
        output,
        mimetype=mimetype,
        as_attachment=True,
        download_name=filename,
    )
