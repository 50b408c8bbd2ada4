"""
Tests for the synthesis engine.

Exercises the full pipeline from construct tree to template.
"""

import pytest
import yaml

from arm_synth.config.models import SynthesisConfig
from arm_synth.exceptions import CircularDependencyError
from arm_synth.iac.engine import SynthesisEngine, SynthesisResult
from arm_synth.iac.emitters.arm_emitter import SCHEMA_URLS
from arm_synth.models.construct import ABSENT, Construct, DeploymentScope, Resource, Stack


def _web_app(stack: Stack) -> None:
    Resource(
        stack,
        "Site",
        resource_type="Microsoft.Web/sites",
        name="web-1",
        location="eastus",
        properties={"httpsOnly": True, "clientCertMode": ABSENT},
    )
    Resource(
        stack,
        "Plan",
        resource_type="Microsoft.Web/serverfarms",
        name="plan-1",
        location="eastus",
        sku={"name": "B1"},
    )


class TestSynthesize:
    """Test synthesizing one stack."""

    def test_pipeline_produces_ordered_template(self, stack):
        _web_app(stack)

        result = SynthesisEngine().synthesize(stack)

        assert isinstance(result, SynthesisResult)
        assert result.stack_name == "app"
        assert result.scope == "resource_group"
        assert [r.name for r in result.records] == ["plan-1", "web-1"]
        resources = result.template["resources"]
        assert [r["name"] for r in resources] == ["plan-1", "web-1"]
        assert resources[1]["dependsOn"] == [
            "[resourceId('Microsoft.Web/serverfarms', 'plan-1')]"
        ]
        assert resources[1]["properties"] == {"httpsOnly": True}
        assert result.validation.is_valid

    def test_collect_resources_skips_nested_stacks(self, stack):
        group = Construct(stack, "Network")
        Resource(
            group,
            "Vnet",
            resource_type="Microsoft.Network/virtualNetworks",
            name="vnet-main",
        )
        nested = Stack(stack, "Nested")
        Resource(nested, "Site", resource_type="Microsoft.Web/sites", name="web-1")
        Resource(stack, "Store", resource_type="Microsoft.Storage/storageAccounts", name="st1")

        resources = SynthesisEngine().collect_resources(stack)

        assert [r.name for r in resources] == ["vnet-main", "st1"]

    def test_deployment_scope_selects_schema(self):
        stack = Stack(None, "sub", deployment_scope=DeploymentScope.SUBSCRIPTION)
        Resource(
            stack,
            "Rg",
            resource_type="Microsoft.Resources/resourceGroups",
            name="rg-app",
            location="eastus",
        )

        result = SynthesisEngine().synthesize(stack)

        assert result.scope == "subscription"
        assert result.template["$schema"] == SCHEMA_URLS[DeploymentScope.SUBSCRIPTION]
        assert result.template["resources"][0]["apiVersion"] == "2021-04-01"

    def test_cycle_propagates(self, stack):
        first = Resource(stack, "A", resource_type="Microsoft.Storage/storageAccounts", name="st1")
        second = Resource(stack, "B", resource_type="Microsoft.Storage/storageAccounts", name="st2")
        first.add_dependency(second)
        second.add_dependency(first)

        with pytest.raises(CircularDependencyError) as exc_info:
            SynthesisEngine().synthesize(stack)

        assert "Microsoft.Storage/storageAccounts/st1" in str(exc_info.value)

    def test_lint_issues_are_returned_not_raised(self, stack):
        Resource(stack, "Empty", resource_type="Microsoft.Web/sites", name="")

        result = SynthesisEngine().synthesize(stack)

        assert not result.validation.is_valid
        assert any(
            issue.field_path == "resources[0].name" for issue in result.validation.errors
        )

    def test_duplicate_resources_reported(self, stack):
        for construct_id in ("First", "Second"):
            Resource(
                stack,
                construct_id,
                resource_type="Microsoft.Storage/storageAccounts",
                name="sa",
            )

        result = SynthesisEngine().synthesize(stack)

        assert len(result.template["resources"]) == 1
        assert not result.validation.is_valid
        duplicate = result.validation.errors[0]
        assert duplicate.message == "Duplicate resource Microsoft.Storage/storageAccounts/sa"
        assert duplicate.field_path == "resources[1].name"

    def test_dependency_outside_stack_reported(self, stack):
        other = Stack(None, "shared")
        external = Resource(
            other,
            "Logs",
            resource_type="Microsoft.Storage/storageAccounts",
            name="stlogs",
        )
        site = Resource(stack, "Site", resource_type="Microsoft.Web/sites", name="web-1")
        site.add_dependency(external)

        result = SynthesisEngine().synthesize(stack)

        assert not result.validation.is_valid
        assert any(
            "not in the template" in issue.message for issue in result.validation.errors
        )

    def test_validation_can_be_disabled(self, stack):
        config = SynthesisConfig(validation={"enabled": False})

        result = SynthesisEngine(config).synthesize(stack)

        assert result.validation.issues == []

    def test_empty_stack_warns(self, stack):
        result = SynthesisEngine().synthesize(stack)

        assert result.template["resources"] == []
        assert result.validation.is_valid
        assert result.validation.warning_count == 1


class TestSynthesizeAll:
    """Test synthesizing every stack of a tree."""

    @pytest.fixture
    def tree(self) -> Construct:
        root = Construct(None, "root")
        for index in range(4):
            unit = Stack(root, f"unit{index}")
            _web_app(unit)
        return root

    def test_every_stack_synthesized(self, tree):
        results = SynthesisEngine().synthesize_all(tree)

        assert list(results) == [f"root/unit{i}" for i in range(4)]
        for result in results.values():
            assert [r.name for r in result.records] == ["plan-1", "web-1"]

    def test_thread_pool_matches_sequential(self, tree):
        sequential = SynthesisEngine().synthesize_all(tree)
        parallel = SynthesisEngine().synthesize_all(tree, max_workers=4)

        assert list(parallel) == list(sequential)
        for path, result in parallel.items():
            assert result.template == sequential[path].template

    def test_root_stack_included(self, stack):
        _web_app(stack)

        results = SynthesisEngine().synthesize_all(stack)

        assert list(results) == ["app"]


class TestFromConfigFile:
    def test_loads_config_and_overrides(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ARM_SYNTH_CONFIG_PATH", raising=False)
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump({"template": {"content_version": "3.0.0.0"}}, f)

        engine = SynthesisEngine.from_config_file(
            config_file, overrides={"resolver": {"mode": "explicit"}}
        )

        assert engine.config.template.content_version == "3.0.0.0"
        assert engine.config.resolver.mode.value == "explicit"
