"""
Domain topology: which DNS names exist and what each of them needs.

``resolve`` expands the configured domains into SubdomainTargets in a stable
order (main apex, main www, then apex/www for each redirect domain in
configuration order). Pulumi resource names are derived from that order, so
reordering it would show up as replacements in ``pulumi preview``.
"""

from planning.errors import DuplicateDomainError, MissingRequiredConfigError, UnknownDomainRoleError
from planning.models import (
    CheckKind,
    DomainRole,
    DomainSpec,
    HealthSignal,
    RecordType,
    SubdomainTarget,
)

_RECORD_KINDS: dict[tuple[DomainRole, bool], frozenset[RecordType]] = {
    (DomainRole.MAIN, False): frozenset(
        {RecordType.A, RecordType.AAAA, RecordType.CAA, RecordType.TXT}
    ),
    # A CNAME excludes every other record type on the same name.
    (DomainRole.MAIN, True): frozenset({RecordType.CNAME}),
    (DomainRole.REDIRECT, False): frozenset({RecordType.A, RecordType.AAAA, RecordType.CAA}),
    (DomainRole.REDIRECT, True): frozenset({RecordType.A, RecordType.AAAA, RecordType.CAA}),
}


def normalize_apex(apex: str) -> str:
    """
    Lower-case and validate an apex domain.

    Raises MissingRequiredConfigError for empty values, names with fewer than
    two labels, and names that already carry the www label.
    """
    normalized = (apex or "").strip().rstrip(".").lower()
    if not normalized:
        raise MissingRequiredConfigError("apex", "apex domain must not be empty")
    labels = normalized.split(".")
    if len(labels) < 2 or not all(labels):
        raise MissingRequiredConfigError("apex", f"{apex!r} is not a registrable domain")
    if labels[0] == "www":
        raise MissingRequiredConfigError(
            "apex", f"{apex!r} must be an apex domain, not its www subdomain"
        )
    return normalized


def record_kinds_for(role: DomainRole, is_www: bool, apex: str = "") -> frozenset[RecordType]:
    try:
        return _RECORD_KINDS[(role, is_www)]
    except KeyError:
        raise UnknownDomainRoleError(apex or "role", role) from None


def _targets_for(domain: DomainSpec) -> list[SubdomainTarget]:
    return [
        SubdomainTarget(
            fqdn=fqdn,
            owning_domain=domain,
            record_kinds=record_kinds_for(domain.role, is_www, domain.apex),
        )
        for fqdn, is_www in ((domain.apex, False), (domain.www, True))
    ]


def resolve(main: DomainSpec, redirects: list[DomainSpec]) -> list[SubdomainTarget]:
    """
    Derive the apex and www SubdomainTargets for every configured domain.

    Args:
        main: The domain hosting the website; role must be MAIN.
        redirects: Domains redirecting to the main website; each role must be
            REDIRECT. May be empty.

    Returns:
        ``2 * (1 + len(redirects))`` targets ordered
        ``[main, www.main, redirects[0], www.redirects[0], ...]``.

    Raises:
        UnknownDomainRoleError: A domain has the wrong role for its position.
        DuplicateDomainError: Two domains share an apex.
        MissingRequiredConfigError: An apex is not a valid registrable domain.
    """
    if main.role is not DomainRole.MAIN:
        raise UnknownDomainRoleError(main.apex, main.role, expected="MAIN")
    for redirect in redirects:
        if redirect.role is not DomainRole.REDIRECT:
            raise UnknownDomainRoleError(redirect.apex, redirect.role, expected="REDIRECT")

    seen: set[str] = set()
    for domain in [main, *redirects]:
        apex = normalize_apex(domain.apex)
        if apex != domain.apex:
            raise MissingRequiredConfigError(
                "apex", f"{domain.apex!r} must be lower-case without a trailing dot"
            )
        if apex in seen:
            raise DuplicateDomainError(apex)
        seen.add(apex)

    targets: list[SubdomainTarget] = []
    for domain in [main, *redirects]:
        targets.extend(_targets_for(domain))
    return targets


def certificate_names(domain: DomainSpec) -> tuple[str, tuple[str, ...]]:
    """Primary name and SANs for an edge certificate covering ``domain``."""
    return domain.www, (domain.apex,)


def derive_health_signals(
    targets: list[SubdomainTarget],
    expected_content: str | None,
) -> list[HealthSignal]:
    """
    One HealthSignal per target, in target order.

    The main www name is the page users actually land on, so its check also
    verifies the page content; every other name only needs a healthy status.
    """
    signals = []
    for target in targets:
        if target.role is DomainRole.MAIN and target.is_www:
            if not expected_content:
                raise MissingRequiredConfigError(
                    "health_check_search_string",
                    f"content to match on {target.fqdn} is required",
                )
            signals.append(
                HealthSignal(
                    target=target,
                    check_kind=CheckKind.STATUS_AND_CONTENT_MATCH,
                    expected_content=expected_content,
                )
            )
        else:
            signals.append(HealthSignal(target=target, check_kind=CheckKind.STATUS_ONLY))
    return signals
