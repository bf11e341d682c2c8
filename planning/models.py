"""
Plain data records for the planning core.

Everything here is a frozen dataclass with tuple-valued collections, so that
two plans built from the same configuration compare equal field by field.
Nothing in this module depends on Pulumi; ``hosted_zone_ref`` and the alias
handles are opaque and may be plain strings or ``pulumi.Output`` values.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DomainRole(Enum):
    """Part a registrable domain plays in the website topology."""

    MAIN = "main"
    REDIRECT = "redirect"


class CheckKind(Enum):
    """What a health check verifies about its endpoint."""

    STATUS_ONLY = "status_only"
    STATUS_AND_CONTENT_MATCH = "status_and_content_match"


class RecordType(Enum):
    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    TXT = "TXT"
    MX = "MX"
    CAA = "CAA"


@dataclass(frozen=True)
class DnsChallenge:
    """
    TXT record used by a third party to verify domain ownership.

    Attributes:
        name: Record name relative to the apex (e.g.
            "_github-pages-challenge-example").
        value: TXT value without surrounding quotes. Visible to any DNS
            client, so it is not a secret.
    """

    name: str
    value: str


@dataclass(frozen=True)
class DomainSpec:
    """
    One registrable apex domain participating in the topology.

    Attributes:
        apex: Domain without subdomain label (e.g. "example.com").
        role: MAIN for the GitHub Pages site, REDIRECT for domains that
            redirect to it.
        hosted_zone_ref: Opaque handle to the existing Route 53 hosted zone.
        txt_values: Lines of the apex TXT record (SPF, provider codes).
        challenges: Verification TXT records placed under the apex.
        cname_target: Host the www CNAME points at (main domain only).
    """

    apex: str
    role: DomainRole
    hosted_zone_ref: Any = None
    txt_values: tuple[str, ...] = ()
    challenges: tuple[DnsChallenge, ...] = ()
    cname_target: str | None = None

    @property
    def www(self) -> str:
        return f"www.{self.apex}"


@dataclass(frozen=True)
class SubdomainTarget:
    """A concrete DNS name (apex or www) derived from a DomainSpec."""

    fqdn: str
    owning_domain: DomainSpec = field(compare=False, repr=False)
    record_kinds: frozenset[RecordType]

    @property
    def is_www(self) -> bool:
        return self.fqdn != self.owning_domain.apex

    @property
    def role(self) -> DomainRole:
        return self.owning_domain.role


@dataclass(frozen=True)
class AliasTarget:
    """Route 53 alias target, e.g. a CloudFront distribution."""

    name: Any
    zone_id: Any


@dataclass(frozen=True)
class RecordSpec:
    """
    A single Route 53 record set to upsert.

    Exactly one of ``ttl`` and ``alias`` is set: alias records have no TTL of
    their own.
    """

    fqdn: str
    type: RecordType
    values: tuple[str, ...] = ()
    ttl: int | None = None
    alias: AliasTarget | None = None

    def __post_init__(self) -> None:
        if (self.ttl is None) == (self.alias is None):
            raise ValueError(f"{self.fqdn} {self.type.value}: set exactly one of ttl and alias")

    @property
    def is_alias(self) -> bool:
        return self.alias is not None


@dataclass(frozen=True)
class HealthSignal:
    """Boolean health indicator bound to one SubdomainTarget."""

    target: SubdomainTarget
    check_kind: CheckKind
    expected_content: str | None = None

    def __post_init__(self) -> None:
        needs_content = self.check_kind is CheckKind.STATUS_AND_CONTENT_MATCH
        if needs_content != bool(self.expected_content):
            raise ValueError(
                f"{self.target.fqdn}: expected_content is required iff the check "
                "matches content"
            )

    @property
    def fqdn(self) -> str:
        return self.target.fqdn
