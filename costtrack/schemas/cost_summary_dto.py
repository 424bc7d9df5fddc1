# costtrack/schemas/cost_summary_dto.py
from typing import Dict

from costtrack.schemas.base_dto import Amount, BaseDTO


class ProjectCostSummaryDTO(BaseDTO):
    '''
    total_cost: exact sum of entry amounts
    cost_by_category: category -> sum; categories without entries are absent
    budget_variance: budget - total_cost (negative = over budget)
    '''
    project_id: str
    budget: Amount
    total_cost: Amount
    cost_by_category: Dict[str, Amount]
    budget_variance: Amount
