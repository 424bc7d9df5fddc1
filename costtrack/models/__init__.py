# costtrack/models/__init__.py
# Importing every model registers its table on Base.metadata.
from costtrack.models.user import User
from costtrack.models.project import Project
from costtrack.models.cost_code import CostCode
from costtrack.models.cost_entry import CostEntry
from costtrack.models.change_order import ChangeOrder
from costtrack.models.audit_log import AuditLog

__all__ = [
    "User",
    "Project",
    "CostCode",
    "CostEntry",
    "ChangeOrder",
    "AuditLog",
]
