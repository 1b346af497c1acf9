from app.schemas.common import Role


ADMIN_LIKE = {Role.admin, Role.general_manager, Role.hr_manager, Role.finance_manager}
PROJECT_ROLES = {Role.project_manager, Role.regional_project_manager, Role.project_secretary, Role.project_advisor}
SELF_SERVICE = {Role.employee, Role.user}


def _role(role: str) -> Role | None:
    try:
        return Role(role.upper())
    except ValueError:
        return None


def is_self_service(role: str) -> bool:
    # unknown roles get the narrowest view
    r = _role(role)
    return r is None or r in SELF_SERVICE


def can_view_labor(role: str) -> bool:
    r = _role(role)
    return r in ADMIN_LIKE or r in PROJECT_ROLES
