"""Tests for the role capability predicate."""

import pytest

from workforce_payroll.api.authorization import Capability, Role, has_capability


class TestHasCapability:
    @pytest.mark.parametrize("role", [Role.MANAGER, Role.ADMIN])
    def test_management_can_view_and_manage(self, role):
        assert has_capability(role, Capability.VIEW_PAYROLL) is True
        assert has_capability(role, Capability.MANAGE_PAYROLL) is True

    def test_employee_has_no_payroll_access(self):
        for capability in Capability:
            assert has_capability(Role.EMPLOYEE, capability) is False

    def test_only_admin_deletes(self):
        assert has_capability(Role.ADMIN, Capability.DELETE_PAY_PERIOD) is True
        assert has_capability(Role.MANAGER, Capability.DELETE_PAY_PERIOD) is False

    def test_accepts_role_names(self):
        assert has_capability("ADMIN", Capability.DELETE_PAY_PERIOD) is True

    def test_unknown_role(self):
        assert has_capability("AUDITOR", Capability.VIEW_PAYROLL) is False
