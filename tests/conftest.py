from typing import Any, Callable, Optional

import pytest

from arm_synth.iac.dependency_resolver import DependencyResolver
from arm_synth.iac.resource_transformer import ResourceTransformer
from arm_synth.models.construct import Resource, Stack
from arm_synth.models.record import CanonicalRecord

# ============================================================================
# Construct Fixtures
# ============================================================================


@pytest.fixture
def stack() -> Stack:
    """Provide an empty resource-group-scoped stack."""
    return Stack(None, "app")


@pytest.fixture
def make_resource(stack: Stack) -> Callable[..., Resource]:
    """Factory for resources attached to the ``stack`` fixture."""
    counter = {"n": 0}

    def _make(
        resource_type: str,
        name: str,
        construct_id: Optional[str] = None,
        scope: Optional[Stack] = None,
        **fields: Any,
    ) -> Resource:
        counter["n"] += 1
        return Resource(
            scope or stack,
            construct_id or f"r{counter['n']}",
            resource_type=resource_type,
            name=name,
            **fields,
        )

    return _make


# ============================================================================
# Record Fixtures
# ============================================================================


@pytest.fixture
def make_record() -> Callable[..., CanonicalRecord]:
    """Factory for canonical records with a default API version."""

    def _make(resource_type: str, name: str, **fields: Any) -> CanonicalRecord:
        fields.setdefault("api_version", "2023-04-01")
        return CanonicalRecord(resource_type=resource_type, name=name, **fields)

    return _make


@pytest.fixture
def vnet_with_inline_subnets(make_record) -> CanonicalRecord:
    """A virtual network declaring three subnets inline."""
    return make_record(
        "Microsoft.Network/virtualNetworks",
        "vnet-main",
        location="eastus",
        properties={
            "addressSpace": {"addressPrefixes": ["10.0.0.0/16"]},
            "subnets": [
                {"name": "snet-web", "properties": {"addressPrefix": "10.0.1.0/24"}},
                {"name": "snet-app", "properties": {"addressPrefix": "10.0.2.0/24"}},
                {"name": "snet-data", "properties": {"addressPrefix": "10.0.3.0/24"}},
            ],
        },
    )


# ============================================================================
# Pipeline Fixtures
# ============================================================================


@pytest.fixture
def transformer() -> ResourceTransformer:
    return ResourceTransformer()


@pytest.fixture
def resolver() -> DependencyResolver:
    return DependencyResolver()
