# costtrack/db/enums.py
import enum

# User related enums
class UserRole(enum.Enum):
    PM = "PM"
    Estimator = "Estimator"
    Accountant = "Accountant"
    Executive = "Executive"

# Project related enums
class ProjectStatus(enum.Enum):
    active = "active"
    completed = "completed"
    archived = "archived"


class ProjectType(enum.Enum):
    commercial = "commercial"
    residential = "residential"
    industrial = "industrial"

# CostCode related enums
class CostCategory(enum.Enum):
    labor = "labor"
    materials = "materials"
    equipment = "equipment"
    subcontractors = "subcontractors"

# ChangeOrder related enums
class ChangeOrderStatus(enum.Enum):
    pending = "pending"
    approved = "approved"    # terminal
    rejected = "rejected"    # terminal

    @property
    def is_terminal(self) -> bool:
        return self is not ChangeOrderStatus.pending

# AuditLog related enums
class AuditEntityType(enum.Enum):
    User = "user"
    Project = "project"
    CostCode = "cost_code"
    CostEntry = "cost_entry"
    ChangeOrder = "change_order"


class AuditAction(enum.Enum):
    create = "create"
    update = "update"
    delete = "delete"
    approve = "approve"
    reject = "reject"
    login = "login"
    logout = "logout"
