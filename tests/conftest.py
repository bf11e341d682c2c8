"""Shared fixtures: a small main + redirect topology."""

import pytest

from planning.models import DnsChallenge, DomainRole, DomainSpec
from planning.topology import derive_health_signals, resolve

SEARCH_STRING = "Example Org | Home"


def make_main(apex: str = "example.com", **kwargs) -> DomainSpec:
    defaults = {
        "hosted_zone_ref": f"zone-{apex}",
        "txt_values": ("v=spf1 mx -all",),
        "challenges": (DnsChallenge(name="_github-pages-challenge-example", value="abc123"),),
        "cname_target": "example.github.io",
    }
    defaults.update(kwargs)
    return DomainSpec(apex=apex, role=DomainRole.MAIN, **defaults)


def make_redirect(apex: str) -> DomainSpec:
    return DomainSpec(apex=apex, role=DomainRole.REDIRECT, hosted_zone_ref=f"zone-{apex}")


@pytest.fixture
def main_domain() -> DomainSpec:
    return make_main()


@pytest.fixture
def redirect_domains() -> list[DomainSpec]:
    return [make_redirect("example.net"), make_redirect("example.org")]


@pytest.fixture
def targets(main_domain, redirect_domains):
    return resolve(main_domain, redirect_domains)


@pytest.fixture
def signals(targets):
    return derive_health_signals(targets, SEARCH_STRING)
