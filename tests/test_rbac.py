from app.core.rbac import can_view_labor, is_self_service


def test_self_service_roles():
    assert is_self_service("EMPLOYEE")
    assert is_self_service("user")
    assert is_self_service("SOMETHING_NEW")
    assert not is_self_service("HR_MANAGER")


def test_labor_visibility():
    assert can_view_labor("PROJECT_SECRETARY")
    assert can_view_labor("admin")
    assert not can_view_labor("EMPLOYEE")
    assert not can_view_labor("WAREHOUSE_MANAGER")
