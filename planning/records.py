"""
Record Set Builder: the Route 53 records each SubdomainTarget needs.

- Main apex: A/AAAA to the GitHub Pages servers, CAA for Amazon and
  Let's Encrypt, the apex TXT record and verification challenges.
- Main www: CNAME to the GitHub Pages default domain. Nothing else, since a
  name with a CNAME may not carry any other record type.
- Redirect apex/www: A/AAAA aliases to the redirect CDN and an Amazon-only
  CAA record.
"""

from planning.errors import MissingRequiredConfigError, UnknownDomainRoleError
from planning.models import AliasTarget, DomainRole, RecordSpec, RecordType, SubdomainTarget

# https://docs.github.com/en/pages/configuring-a-custom-domain-for-your-github-pages-site/managing-a-custom-domain-for-your-github-pages-site#configuring-an-apex-domain
GITHUB_PAGES_IPV4: tuple[str, ...] = (
    "185.199.108.153",
    "185.199.109.153",
    "185.199.110.153",
    "185.199.111.153",
)
GITHUB_PAGES_IPV6: tuple[str, ...] = (
    "2606:50c0:8000::153",
    "2606:50c0:8001::153",
    "2606:50c0:8002::153",
    "2606:50c0:8003::153",
)

AMAZON_CERTIFICATE_AUTHORITIES: tuple[str, ...] = (
    "amazon.com",
    "amazontrust.com",
    "awstrust.com",
    "amazonaws.com",
)
LETS_ENCRYPT = "letsencrypt.org"

DEFAULT_TTL = 1800
VERIFICATION_TTL = 300
# Route 53 recommends 60s for records associated with a health check.
HEALTH_CHECKED_CAA_TTL = 60


def caa_value(authority: str, tag: str = "issue") -> str:
    """Route 53 CAA value, e.g. ``0 issue "amazon.com"``."""
    return f'0 {tag} "{authority}"'


def _caa(fqdn: str, authorities: tuple[str, ...], ttl: int) -> RecordSpec:
    return RecordSpec(
        fqdn=fqdn,
        type=RecordType.CAA,
        values=tuple(caa_value(authority) for authority in authorities),
        ttl=ttl,
    )


def _main_apex_records(target: SubdomainTarget) -> list[RecordSpec]:
    domain = target.owning_domain
    records = [
        RecordSpec(fqdn=target.fqdn, type=RecordType.A, values=GITHUB_PAGES_IPV4, ttl=DEFAULT_TTL),
        RecordSpec(
            fqdn=target.fqdn, type=RecordType.AAAA, values=GITHUB_PAGES_IPV6, ttl=DEFAULT_TTL
        ),
        _caa(target.fqdn, AMAZON_CERTIFICATE_AUTHORITIES + (LETS_ENCRYPT,), DEFAULT_TTL),
    ]
    if domain.txt_values:
        records.append(
            RecordSpec(
                fqdn=target.fqdn,
                type=RecordType.TXT,
                values=tuple(domain.txt_values),
                ttl=VERIFICATION_TTL,
            )
        )
    for challenge in domain.challenges:
        if not challenge.value:
            raise MissingRequiredConfigError(
                challenge.name, f"verification TXT value for {domain.apex} is missing"
            )
        records.append(
            RecordSpec(
                fqdn=f"{challenge.name}.{domain.apex}",
                type=RecordType.TXT,
                values=(challenge.value,),
                ttl=VERIFICATION_TTL,
            )
        )
    return records


def _main_www_records(target: SubdomainTarget) -> list[RecordSpec]:
    cname_target = target.owning_domain.cname_target
    if not cname_target:
        raise MissingRequiredConfigError(
            "github_pages_default_domain", f"CNAME target for {target.fqdn} is missing"
        )
    return [
        RecordSpec(fqdn=target.fqdn, type=RecordType.CNAME, values=(cname_target,), ttl=DEFAULT_TTL)
    ]


def _redirect_records(target: SubdomainTarget, cdn_alias: AliasTarget | None) -> list[RecordSpec]:
    if cdn_alias is None:
        raise MissingRequiredConfigError(
            "cdn_alias", f"redirect CDN alias target for {target.fqdn} is missing"
        )
    return [
        RecordSpec(fqdn=target.fqdn, type=RecordType.A, alias=cdn_alias),
        RecordSpec(fqdn=target.fqdn, type=RecordType.AAAA, alias=cdn_alias),
        _caa(target.fqdn, AMAZON_CERTIFICATE_AUTHORITIES, HEALTH_CHECKED_CAA_TTL),
    ]


def assert_cname_exclusive(records: list[RecordSpec]) -> None:
    """Raise ValueError if a CNAME shares its name with any other record."""
    types_by_name: dict[str, list[RecordType]] = {}
    for record in records:
        types_by_name.setdefault(record.fqdn, []).append(record.type)
    for fqdn, types in types_by_name.items():
        if RecordType.CNAME in types and len(types) > 1:
            raise ValueError(f"{fqdn} has a CNAME record alongside other records: {types}")


def build_records(target: SubdomainTarget, cdn_alias: AliasTarget | None = None) -> list[RecordSpec]:
    """
    Records required for one SubdomainTarget.

    Args:
        target: Name to build records for.
        cdn_alias: Distribution the redirect names alias to. Required for
            redirect targets, ignored otherwise.

    Raises:
        UnknownDomainRoleError: The owning domain's role is not MAIN or
            REDIRECT.
        MissingRequiredConfigError: A value the records need is absent.
    """
    role = target.role
    if role is DomainRole.MAIN:
        records = _main_www_records(target) if target.is_www else _main_apex_records(target)
    elif role is DomainRole.REDIRECT:
        records = _redirect_records(target, cdn_alias)
    else:
        raise UnknownDomainRoleError(target.owning_domain.apex, role)
    assert_cname_exclusive(records)
    return records


def build_record_plan(
    targets: list[SubdomainTarget],
    cdn_aliases: dict[str, AliasTarget] | None = None,
) -> list[RecordSpec]:
    """
    Records for a whole topology, in target order.

    ``cdn_aliases`` maps a redirect apex to the alias target of its CDN.
    """
    cdn_aliases = cdn_aliases or {}
    records: list[RecordSpec] = []
    for target in targets:
        records.extend(build_records(target, cdn_aliases.get(target.owning_domain.apex)))
    assert_cname_exclusive(records)
    return records
