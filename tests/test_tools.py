"""Tests for the policy tools and the registry dispatch."""

import json

import pytest

from core.data import RepositoryError
from use_cases.scheduling.data.repository import InMemoryPolicyRepository
from use_cases.scheduling.service import SchedulingPolicyService, set_policy_service
from use_cases.scheduling.tools import POLICY_TOOLS, TOOL_REGISTRY, execute_tool

pytestmark = pytest.mark.usefixtures("installed_service")


def call(tool_name, **arguments):
    return json.loads(execute_tool(tool_name, arguments))


def create(kind, label, data, provider_id="dr-hill"):
    return call("policy_create", providerId=provider_id, kind=kind, label=label, data=data)


class TestCatalog:
    def test_tool_names(self):
        assert [t["function"]["name"] for t in POLICY_TOOLS] == [
            "policy_list",
            "policy_get",
            "policy_create",
            "policy_update",
            "policy_delete",
            "policy_check",
            "policy_explain",
        ]
        assert TOOL_REGISTRY.get_tool_names() == [t["function"]["name"] for t in POLICY_TOOLS]

    def test_categories(self):
        admin = [t.name for t in TOOL_REGISTRY.get_tools(["admin"])]

        assert admin == ["policy_create", "policy_update", "policy_delete"]

    def test_catalog_is_openai_function_format(self):
        entry = TOOL_REGISTRY.get_catalog()[0]

        assert entry["type"] == "function"
        assert set(entry["function"]) == {"name", "description", "parameters"}


class TestDispatch:
    def test_unknown_tool(self):
        assert call("policy_frobnicate") == {"error": "Unknown tool: policy_frobnicate"}

    def test_missing_required_argument(self):
        result = call("policy_check", providerId="dr-hill")

        assert result == {"error": "Missing required argument(s): action, dateTime"}

    def test_unexpected_argument(self):
        assert call("policy_get", id="x", verbose=True) == {"error": "Unexpected argument(s): verbose"}

    def test_repository_failure_becomes_error_payload(self):
        class BrokenRepository(InMemoryPolicyRepository):
            def list(self, options=None):
                raise RepositoryError("Failed to list policies: unavailable")

        set_policy_service(SchedulingPolicyService(BrokenRepository()))

        assert call("policy_list") == {"error": "Failed to list policies: unavailable"}


class TestCrud:
    def test_create_get_list(self, booking_window_data):
        created = create("BOOKING_WINDOW", "Advance Booking", booking_window_data)

        assert created["providerId"] == "dr-hill"
        assert created["isActive"] is True
        assert created["data"] == {"kind": "BOOKING_WINDOW", "minAdvanceHours": 24, "maxAdvanceDays": 30}
        assert call("policy_get", id=created["id"]) == created
        assert [p["id"] for p in call("policy_list", providerId="dr-hill")] == [created["id"]]

    def test_create_invalid(self, office_hours_data):
        office_hours_data["timeWindows"] = [{"start": "17:00", "end": "09:00"}]

        result = create("AVAILABILITY", "Office Hours", office_hours_data)

        assert result == {
            "error": "Invalid policy",
            "details": [{"field": "data.timeWindows.0", "message": "Start time must be before end time"}],
        }
        assert call("policy_list") == []

    def test_list_by_kind(self, booking_window_data, lunch_block_data):
        create("BOOKING_WINDOW", "Advance Booking", booking_window_data)
        block = create("BLOCK", "Lunch Break", lunch_block_data)

        assert [p["id"] for p in call("policy_list", kind="BLOCK")] == [block["id"]]

    def test_list_unknown_kind(self):
        assert call("policy_list", kind="HOLIDAY") == {"error": "Unknown policy kind: HOLIDAY"}

    def test_get_missing(self):
        assert call("policy_get", id="missing") == {"error": "Policy not found"}

    def test_update(self, lunch_block_data):
        created = create("BLOCK", "Lunch Break", lunch_block_data)
        lunch_block_data["reason"] = "Team lunch"

        updated = call("policy_update", id=created["id"], label="Team Lunch", data=lunch_block_data)

        assert updated["id"] == created["id"]
        assert updated["kind"] == "BLOCK"
        assert updated["label"] == "Team Lunch"
        assert updated["data"]["reason"] == "Team lunch"

    def test_update_wrong_kind(self, lunch_block_data, booking_window_data):
        created = create("BLOCK", "Lunch Break", lunch_block_data)

        result = call("policy_update", id=created["id"], data={"kind": "BOOKING_WINDOW", **booking_window_data})

        assert result["error"] == "Invalid policy"
        assert result["details"][0]["field"] == "data.kind"

    def test_update_missing(self):
        assert call("policy_update", id="missing", label="x") == {"error": "Policy not found"}

    def test_deactivate_and_list_all(self, lunch_block_data):
        created = create("BLOCK", "Lunch Break", lunch_block_data)

        assert call("policy_update", id=created["id"], isActive=False)["isActive"] is False
        assert call("policy_list") == []
        assert [p["id"] for p in call("policy_list", activeOnly=False)] == [created["id"]]

    def test_delete_twice(self, lunch_block_data):
        created = create("BLOCK", "Lunch Break", lunch_block_data)

        assert call("policy_delete", id=created["id"]) == {"success": True}
        assert call("policy_delete", id=created["id"]) == {"success": False}
        assert call("policy_delete", id="missing") == {"success": False}


class TestCheck:
    def test_allowed(self, office_hours_data):
        create("AVAILABILITY", "Office Hours", office_hours_data)

        result = call("policy_check", providerId="dr-hill", action="book", dateTime="2026-02-02T10:00:00")

        assert result == {"allowed": True, "conflicts": []}

    def test_blocked(self, office_hours_data, lunch_block_data):
        create("AVAILABILITY", "Office Hours", office_hours_data)
        create("BLOCK", "Lunch Break", lunch_block_data)

        result = call("policy_check", providerId="dr-hill", action="book", dateTime="2026-02-02T12:30:00", duration=15)

        assert result == {"allowed": False, "conflicts": ["Time is blocked: Lunch break"]}

    def test_too_far_ahead(self, booking_window_data):
        create("BOOKING_WINDOW", "Advance Booking", booking_window_data)

        # Clock is fixed at 2026-01-31 09:00
        result = call("policy_check", providerId="dr-hill", action="book", dateTime="2026-04-01T09:00:00")

        assert result["conflicts"] == ["Cannot book more than 30 days in advance"]

    def test_unknown_action(self):
        result = call("policy_check", providerId="dr-hill", action="cancel", dateTime="2026-02-02T10:00:00")

        assert result["error"].startswith("Unknown action: cancel")

    def test_invalid_date_time(self):
        result = call("policy_check", providerId="dr-hill", action="book", dateTime="next tuesday")

        assert result["error"].startswith("Invalid dateTime")


class TestExplain:
    def test_returns_plain_text(self, lunch_block_data):
        create("BLOCK", "Lunch Break", lunch_block_data)

        assert execute_tool("policy_explain", {"providerId": "dr-hill"}) == "**Blocked Time:**\n  • Lunch Break"

    def test_no_policies(self):
        assert execute_tool("policy_explain", {"providerId": "dr-hill"}) == "No scheduling policies configured."


class TestProviderRequired:
    @pytest.mark.parametrize("provider_id", ["", "   "])
    def test_check_with_blank_provider(self, lunch_block_data, provider_id):
        create("BLOCK", "Lunch Break", lunch_block_data)

        result = call("policy_check", providerId=provider_id, action="book", dateTime="2026-02-02T12:30:00")

        assert result == {"error": "providerId is required"}

    def test_explain_with_blank_provider(self, lunch_block_data):
        create("BLOCK", "Lunch Break", lunch_block_data)

        assert call("policy_explain", providerId="") == {"error": "providerId is required"}

    def test_list_with_empty_provider_matches_nothing(self, lunch_block_data):
        create("BLOCK", "Lunch Break", lunch_block_data)

        assert call("policy_list", providerId="") == []


class TestFractionalBookingWindow:
    def test_create_and_check(self):
        created = create("BOOKING_WINDOW", "Short Notice", {"minAdvanceHours": 1.5, "maxAdvanceDays": 30})

        assert created["data"]["minAdvanceHours"] == 1.5
        assert created["data"]["maxAdvanceDays"] == 30

        # Clock is fixed at 2026-01-31 09:00
        result = call("policy_check", providerId="dr-hill", action="book", dateTime="2026-01-31T10:00:00")

        assert result == {"allowed": False, "conflicts": ["Must book at least 1.5 hours in advance"]}
