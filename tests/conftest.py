"""Shared pytest fixtures for scubaconfig tests."""

from pathlib import Path

import pytest

from scubaconfig.catalog.models import ReferenceCatalog

SMALL_CATALOG = {
    "exclusion_types": [
        {
            "name": "cap_exclusions",
            "group_name": "CapExclusions",
            "fields": [
                {"name": "Users", "kind": "array", "value_type": "guid"},
                {"name": "Groups", "kind": "array", "value_type": "guid"},
            ],
        },
        {
            "name": "allowed_forwarding_domains",
            "group_name": "AllowedForwardingDomains",
            "fields": [{"name": "Domains", "kind": "array", "value_type": "domain"}],
        },
        {
            "name": "dmarc_reporting",
            "group_name": "DmarcReporting",
            "fields": [{"name": "AggregateReportAddress", "kind": "scalar", "value_type": "email"}],
        },
    ],
    "products": [
        {
            "code": "aad",
            "display_name": "Azure Active Directory",
            "supports_exclusions": True,
            "policies": [
                {
                    "id": "MS.AAD.1.1v1",
                    "name": "Legacy authentication SHALL be blocked.",
                    "exclusion_type": "cap_exclusions",
                },
                {
                    "id": "MS.AAD.2.1v1",
                    "name": "Users detected as high risk SHALL be blocked.",
                    "exclusion_type": "cap_exclusions",
                },
                {"id": "MS.AAD.5.1v1", "name": "Only administrators SHALL register applications."},
            ],
        },
        {
            "code": "exo",
            "display_name": "Exchange Online",
            "supports_exclusions": True,
            "policies": [
                {
                    "id": "MS.EXO.1.1v1",
                    "name": "Automatic forwarding to external domains SHALL be disabled.",
                    "exclusion_type": "allowed_forwarding_domains",
                },
                {"id": "MS.EXO.2.2v2", "name": "An SPF policy SHALL be published."},
                {
                    "id": "MS.EXO.4.3v1",
                    "name": "The DMARC point of contact SHALL include the central address.",
                    "exclusion_type": "dmarc_reporting",
                },
            ],
        },
        {
            "code": "teams",
            "display_name": "Microsoft Teams",
            "policies": [{"id": "MS.TEAMS.1.1v1", "name": "External participants SHOULD NOT control desktops."}],
        },
    ],
}


@pytest.fixture
def catalog() -> ReferenceCatalog:
    """A small catalog with three products."""
    return ReferenceCatalog.model_validate(SMALL_CATALOG)


@pytest.fixture
def write_config(tmp_path: Path):
    """Factory fixture to write configuration files."""

    def _write(content: str, name: str = "config.yaml") -> Path:
        config_path = tmp_path / name
        config_path.write_text(content)
        return config_path

    return _write
