"""Tests for the static system registry."""

import pytest

from roi_first.system_registry import DEFAULT_TEMPLATE_FILE, SystemRegistry


@pytest.fixture(scope="module")
def registry() -> SystemRegistry:
    return SystemRegistry()


class TestSystemRegistry:
    def test_selection_grid(self, registry) -> None:
        listed = {config.system_id for config in registry.list_systems()}

        assert listed == {
            "order_to_cash",
            "customer_support",
            "customer_support_automation",
            "legal_and_compliance",
            "cost_to_hire",
            "legacy_takeover",
            "real_time_insights",
        }

    def test_unlisted_systems_are_reachable_by_id(self, registry) -> None:
        assert registry.get_system("compliance").display_name == "Contract Management Compliance"
        assert len(registry.list_systems(include_unlisted=True)) == 10

    def test_dimensions(self, registry) -> None:
        customer_support = registry.get_system("customer_support")

        assert customer_support.display_name == "Agentic Customer Support"
        assert customer_support.dimensions == [
            "Cost for Delay in Case Handling",
            "Cost for Case Recurrence",
            "Operational Cost",
            "Cost for Poor Quality",
        ]

    def test_unknown_system(self, registry) -> None:
        assert registry.get_system("moon_mining") is None
        assert registry.display_name("moon_mining") == "moon_mining"

    def test_templates(self, registry) -> None:
        assert registry.template_file("cost_to_hire") == "Plantilla_Cost_To_Hire.txt"
        assert registry.template_file("physical-ai") == DEFAULT_TEMPLATE_FILE
        assert registry.template_download_name("Plantilla_Order_To_Cash.txt") == "template_order_to_cash.txt"
