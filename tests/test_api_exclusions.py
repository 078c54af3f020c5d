"""Tests for exclusion inference endpoints."""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from filterforge.config import settings
from filterforge.exclusion import get_rules, load_rules
from filterforge.main import app
from filterforge.models.rules import (
    ExclusionGroup,
    FieldRequirementRule,
    RuleSet,
)


@pytest.fixture
async def client():
    """Provide an async test client backed by the packaged rules."""
    app.dependency_overrides[get_rules] = lambda: load_rules()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestRulesEndpoint:
    async def test_returns_all_collections(self, client: AsyncClient) -> None:
        response = await client.get("/exclusions/rules")

        assert response.status_code == 200
        data = response.json()
        assert len(data["field_to_attribute"]) > 0
        assert len(data["attribute_exclusion_groups"]) > 0
        assert len(data["attribute_to_field"]) > 0

    async def test_rules_match_loaded_set(self, client: AsyncClient) -> None:
        response = await client.get("/exclusions/rules")

        titles = [g["title"] for g in response.json()["attribute_exclusion_groups"]]
        assert titles == [g.title for g in load_rules().attribute_exclusion_groups]


class TestInferFromFilters:
    async def test_empty_filters_leave_everything_enabled(
        self, client: AsyncClient, sample_filters_payload: dict
    ) -> None:
        response = await client.post("/exclusions/infer", json=sample_filters_payload)

        assert response.status_code == 200
        data = response.json()
        assert all(s["enabled"] for s in data["attribute_states"].values())
        assert all(s["enabled"] for s in data["field_states"].values())
        assert data["conflicts"] == []
        assert data["trace"] is None
        assert data["converged"] is True

    async def test_monster_card_type_disables_spell_and_trap(
        self, client: AsyncClient, sample_filters_payload: dict
    ) -> None:
        payload = {**sample_filters_payload, "cardType": "monster"}
        response = await client.post("/exclusions/infer", json=payload)

        states = response.json()["attribute_states"]
        assert states["card-type_monster"]["selected"] is True
        assert states["card-type_spell"]["enabled"] is False
        assert states["card-type_spell"]["disabled_reason"] == "Monster is selected"
        assert states["card-type_trap"]["enabled"] is False

    async def test_level_value_disables_link_rating(
        self, client: AsyncClient, sample_filters_payload: dict
    ) -> None:
        payload = {**sample_filters_payload, "levelValues": [4]}
        response = await client.post("/exclusions/infer", json=payload)

        data = response.json()
        assert data["attribute_states"]["monster-type_link"]["enabled"] is False
        assert data["attribute_states"]["monster-type_link"]["disabled_reason"] == (
            "Level/Rank is set"
        )
        assert data["field_states"]["link-value"]["enabled"] is False
        assert data["field_states"]["level-rank"]["has_input"] is True

    async def test_trace_is_returned_on_request(
        self, client: AsyncClient, sample_filters_payload: dict
    ) -> None:
        payload = {**sample_filters_payload, "linkValues": [2]}
        response = await client.post("/exclusions/infer", params={"trace": "true"}, json=payload)

        trace = response.json()["trace"]
        assert trace
        assert trace[0]["action"] == "field-to-attribute"
        assert [entry["step"] for entry in trace] == sorted(entry["step"] for entry in trace)

    async def test_invalid_payload_is_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/exclusions/infer", json={"levelValues": "four"})

        assert response.status_code == 422


class TestInferFromState:
    async def test_contradiction_is_data_not_error(self, client: AsyncClient) -> None:
        """Choosing Fusion while a Link Rating is set is reported, not rejected."""
        response = await client.post(
            "/exclusions/infer/state",
            json={
                "mode": "and",
                "selected_attributes": ["monster-type_fusion"],
                "field_inputs": {"link-value": True},
            },
        )

        assert response.status_code == 200
        conflicts = response.json()["conflicts"]
        fusion = [c for c in conflicts if c["subject"] == "monster-type_fusion"]
        assert fusion
        assert fusion[0]["type"] == "contradiction"
        assert fusion[0]["sources"] == ["monster-type_link"]

    async def test_defaults_to_and_mode(self, client: AsyncClient) -> None:
        response = await client.post(
            "/exclusions/infer/state",
            json={"selected_attributes": ["monster-type_normal", "monster-type_fusion"]},
        )

        states = response.json()["attribute_states"]
        assert states["monster-type_normal"]["enabled"] is True
        assert states["monster-type_fusion"]["enabled"] is False

    async def test_or_mode_lets_sub_types_coexist(self, client: AsyncClient) -> None:
        response = await client.post(
            "/exclusions/infer/state",
            json={
                "mode": "or",
                "selected_attributes": ["monster-type_normal", "monster-type_fusion"],
            },
        )

        states = response.json()["attribute_states"]
        assert states["monster-type_normal"]["enabled"] is True
        assert states["monster-type_fusion"]["enabled"] is True

    async def test_unknown_mode_is_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/exclusions/infer/state", json={"mode": "xor"})

        assert response.status_code == 422


class TestNonConvergence:
    async def test_warning_logged_when_cap_is_hit(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        rules = RuleSet(
            field_to_attribute=(
                FieldRequirementRule(title="a", trigger_patterns=("f",), target=("x",)),
            ),
            attribute_exclusion_groups=(ExclusionGroup(title="g", items=("x", "y")),),
        )
        app.dependency_overrides[get_rules] = lambda: rules
        monkeypatch.setattr(settings, "inference_max_iterations", 1)

        with caplog.at_level(logging.WARNING):
            response = await client.post(
                "/exclusions/infer/state", json={"field_inputs": {"f": True}}
            )

        data = response.json()
        assert data["converged"] is False
        assert data["iterations"] == 1
        assert "EXCLUSION_INFERENCE_NOT_CONVERGED" in caplog.text
