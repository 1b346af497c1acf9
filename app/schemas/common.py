from enum import Enum


class RequestDomain(str, Enum):
    leave = "LEAVE"
    loan = "LOAN"
    labor = "LABOR"


class CanonicalStatus(str, Enum):
    new = "NEW"
    inprocess = "INPROCESS"
    approved = "APPROVED"
    rejected = "REJECTED"
    completed = "COMPLETED"


class StepStatus(str, Enum):
    completed = "COMPLETED"
    pending = "PENDING"
    future = "FUTURE"
    rejected = "REJECTED"
    skipped = "SKIPPED"


class Role(str, Enum):
    admin = "ADMIN"
    general_manager = "GENERAL_MANAGER"
    hr_manager = "HR_MANAGER"
    finance_manager = "FINANCE_MANAGER"
    project_manager = "PROJECT_MANAGER"
    regional_project_manager = "REGIONAL_PROJECT_MANAGER"
    project_secretary = "PROJECT_SECRETARY"
    project_advisor = "PROJECT_ADVISOR"
    warehouse_manager = "WAREHOUSE_MANAGER"
    employee = "EMPLOYEE"
    user = "USER"
