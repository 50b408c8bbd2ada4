"""Tests for the canonical record."""

import dataclasses

import pytest

from arm_synth.models.record import CanonicalRecord


@pytest.fixture
def subnet() -> CanonicalRecord:
    return CanonicalRecord(
        resource_type="Microsoft.Network/virtualNetworks/subnets",
        api_version="2023-04-01",
        name="vnet-main/snet-web",
        properties={"addressPrefix": "10.0.1.0/24"},
    )


class TestCanonicalRecord:
    def test_derived_fields(self, subnet):
        assert subnet.key == "Microsoft.Network/virtualNetworks/subnets/vnet-main/snet-web"
        assert subnet.name_segments == ("vnet-main", "snet-web")
        assert subnet.is_child

    def test_is_frozen(self, subnet):
        with pytest.raises(dataclasses.FrozenInstanceError):
            subnet.name = "other"

    def test_to_dict_omits_unset_fields(self, subnet):
        assert subnet.to_dict() == {
            "type": "Microsoft.Network/virtualNetworks/subnets",
            "apiVersion": "2023-04-01",
            "name": "vnet-main/snet-web",
            "properties": {"addressPrefix": "10.0.1.0/24"},
        }

    def test_with_depends_on(self, subnet):
        updated = subnet.with_depends_on(["[resourceId('a/b', 'c')]"])

        assert updated.depends_on == ("[resourceId('a/b', 'c')]",)
        assert updated.to_dict()["dependsOn"] == ["[resourceId('a/b', 'c')]"]
        assert subnet.depends_on is None

    def test_empty_depends_on_removes_field(self, subnet):
        updated = subnet.with_depends_on(["x"]).with_depends_on([])

        assert updated.depends_on is None
        assert "dependsOn" not in updated.to_dict()

    def test_from_dict(self):
        record = CanonicalRecord.from_dict(
            {
                "type": "Microsoft.Web/sites",
                "apiVersion": "2023-01-01",
                "name": "web-1",
                "location": "eastus",
                "dependsOn": ["[resourceId('Microsoft.Web/serverfarms', 'plan-1')]"],
            }
        )

        assert record.resource_type == "Microsoft.Web/sites"
        assert record.location == "eastus"
        assert record.depends_on == (
            "[resourceId('Microsoft.Web/serverfarms', 'plan-1')]",
        )
        assert not record.is_child
