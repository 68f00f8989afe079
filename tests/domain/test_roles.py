"""Tests for the Role enumeration and its lenient parser."""

import pytest

from eventflow_kernel.domain.roles import ROLE_DISPLAY_NAMES, Role


class TestRoleParse:

    @pytest.mark.parametrize("value", ["CS", "SCS", "FM", "AM", "PM", "SM", "HR"])
    def test_known_strings(self, value):
        assert Role.parse(value) is Role(value)

    def test_member_passes_through(self):
        assert Role.parse(Role.FM) is Role.FM

    @pytest.mark.parametrize("value", ["cs", "John Doe", "", "ADMIN", None, 3, ["CS"]])
    def test_anything_else_is_none(self, value):
        assert Role.parse(value) is None

    def test_role_compares_equal_to_its_string(self):
        assert Role.PM == "PM"


class TestDisplayNames:

    def test_every_role_has_a_display_name(self):
        assert set(ROLE_DISPLAY_NAMES) == set(Role)

    def test_display_name_property(self):
        assert Role.SCS.display_name == "Senior Customer Service"
        assert Role.AM.display_name == "Administration Manager"
