"""Well-known ARM resource types and their default API versions."""

from typing import Dict, Optional

RESOURCE_GROUP = "Microsoft.Resources/resourceGroups"
VIRTUAL_NETWORK = "Microsoft.Network/virtualNetworks"
SUBNET = "Microsoft.Network/virtualNetworks/subnets"
NETWORK_SECURITY_GROUP = "Microsoft.Network/networkSecurityGroups"
SECURITY_RULE = "Microsoft.Network/networkSecurityGroups/securityRules"
NETWORK_INTERFACE = "Microsoft.Network/networkInterfaces"
PUBLIC_IP_ADDRESS = "Microsoft.Network/publicIPAddresses"
VIRTUAL_MACHINE = "Microsoft.Compute/virtualMachines"
WEB_SITE = "Microsoft.Web/sites"
SERVER_FARM = "Microsoft.Web/serverfarms"
STORAGE_ACCOUNT = "Microsoft.Storage/storageAccounts"
KEY_VAULT = "Microsoft.KeyVault/vaults"
SQL_SERVER = "Microsoft.Sql/servers"

FALLBACK_API_VERSION = "2023-01-01"

DEFAULT_API_VERSIONS: Dict[str, str] = {
    RESOURCE_GROUP: "2021-04-01",
    VIRTUAL_NETWORK: "2023-04-01",
    SUBNET: "2023-04-01",
    NETWORK_SECURITY_GROUP: "2023-04-01",
    SECURITY_RULE: "2023-04-01",
    NETWORK_INTERFACE: "2023-04-01",
    PUBLIC_IP_ADDRESS: "2023-04-01",
    VIRTUAL_MACHINE: "2023-03-01",
    WEB_SITE: "2023-01-01",
    SERVER_FARM: "2023-01-01",
    STORAGE_ACCOUNT: "2023-01-01",
    KEY_VAULT: "2023-02-01",
    SQL_SERVER: "2022-11-01",
}


def type_segments(resource_type: str) -> int:
    return len(resource_type.split("/"))


def parent_resource_type(resource_type: str) -> Optional[str]:
    """Parent type of a hierarchical type.

    ``Microsoft.Network/virtualNetworks/subnets`` gives
    ``Microsoft.Network/virtualNetworks``; two-segment types have no parent.
    """
    parts = resource_type.split("/")
    if len(parts) < 3:
        return None
    return "/".join(parts[:-1])


def parent_resource_name(name: str) -> Optional[str]:
    """Everything before the last '/' of a child resource name."""
    parts = name.split("/")
    if len(parts) < 2:
        return None
    return "/".join(parts[:-1])
