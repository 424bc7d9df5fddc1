from decimal import Decimal
from typing import Dict

import pandas as pd
from sqlalchemy import select
from sqlalchemy.orm import Session

from costtrack.errors import NotFoundError
from costtrack.models.cost_code import CostCode
from costtrack.models.cost_entry import CostEntry
from costtrack.models.project import Project
from costtrack.models.user import User
from costtrack.schemas.cost_summary_dto import ProjectCostSummaryDTO


class CostCalculationService:
    """
    Read-only cost aggregation for a project. Nothing is persisted or cached;
    every call recomputes from the current cost entries.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_project_cost_summary(self, project_id: str) -> ProjectCostSummaryDTO:
        """
        Compute total cost, cost per category and budget variance.

        Rules:
        - total_cost is the exact Decimal sum of every entry amount of the project
        - cost_by_category only holds categories that have at least one entry
        - budget_variance = budget - total_cost
        :param project_id: project to summarise
        :type project_id: str
        :raises NotFoundError: project does not exist
        """
        # One statement, so budget and entries come from the same snapshot.
        # The outer joins keep a single (budget, None, None) row for a project without entries.
        rows = self.db.execute(
            select(Project.budget, CostCode.category, CostEntry.amount)
            .select_from(Project)
            .outerjoin(CostEntry, CostEntry.project_id == Project.id)
            .outerjoin(CostCode, CostCode.id == CostEntry.cost_code_id)
            .where(Project.id == project_id)
        ).all()

        if not rows:
            raise NotFoundError(f"Project not found: {project_id}")

        budget = Decimal(rows[0].budget)
        total_cost = Decimal("0.00")
        cost_by_category: Dict[str, Decimal] = {}

        # summed here rather than with SUM(): SQLite aggregates NUMERIC as float
        for row in rows:
            if row.amount is None:
                continue
            amount = Decimal(row.amount)
            category = row.category.value
            cost_by_category[category] = cost_by_category.get(category, Decimal("0.00")) + amount
            total_cost += amount

        return ProjectCostSummaryDTO(
            project_id=project_id,
            budget=budget,
            total_cost=total_cost,
            cost_by_category=cost_by_category,
            budget_variance=budget - total_cost,
        )

    def generate_df_report(self, project: Project) -> pd.DataFrame:
        """
        Build a human-readable cost report for one project: header block,
        one row per cost entry (newest first), category subtotals, totals.

        :param project: an already loaded project; the caller resolves the id
        This function does NOT persist data.
        """
        project_id = project.id
        summary = self.get_project_cost_summary(project_id)

        entries = self.db.execute(
            select(CostEntry, CostCode, User)
            .join(CostCode, CostCode.id == CostEntry.cost_code_id)
            .outerjoin(User, User.id == CostEntry.entered_by)
            .where(CostEntry.project_id == project_id)
            .order_by(CostEntry.entry_date.desc(), CostEntry.created_at.desc())
        ).all()

        rows = []

        # project header
        rows.append(["Project Cost Report"])
        rows.append(["Project Number", project.project_number])
        rows.append(["Project Name", project.name])
        rows.append(["Project Type", project.project_type.value])
        rows.append(["Status", project.status.value])
        rows.append(["", ""])

        # entry detail
        rows.append(["Date", "Cost Code", "Category", "Description", "Quantity", "Unit Cost", "Amount", "Entered By"])
        for entry, cost_code, user in entries:
            rows.append([
                entry.entry_date.date().isoformat(),
                cost_code.code,
                cost_code.category.value,
                entry.description,
                entry.quantity,
                entry.unit_cost,
                entry.amount,
                user.display_name if user is not None else entry.entered_by,
            ])
        rows.append(["", ""])

        # category subtotals
        rows.append(["Category", "Total"])
        for category, amount in sorted(summary.cost_by_category.items()):
            rows.append([category, amount])
        rows.append(["", ""])

        rows.append(["Total Cost", summary.total_cost])
        rows.append(["Budget", summary.budget])
        rows.append(["Budget Variance", summary.budget_variance])

        return pd.DataFrame(rows)
