"""
Stack configuration loaded from pulumi.Config().

Provides a typed, immutable view of stack settings. All settings are read from
Pulumi config (e.g. Pulumi.<stack>.yaml or pulumi config set). Keys in
_CONFIG_SPEC are required; keys in _OPTIONAL_SPEC may be omitted. Used by
__main__.main() to build the domain topology, records, certificates, DNSSEC
and alarms.

A missing or blank required key raises MissingRequiredConfigError naming the
key, and a region-bound setting outside us-east-1 raises InvalidRegionError,
both before any resource is registered. Lists and objects are read with
config.get_object; scalars are read as plain strings.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pulumi

from components._helpers import arn_region, parse_email_list
from components.dnssec import DNSSEC_REGION
from components.health_alarms import METRICS_REGION
from components.redirect import EDGE_REGION
from planning.errors import MissingRequiredConfigError, require_region
from planning.models import DnsChallenge


def _require_str(config: pulumi.Config, key: str) -> str:
    raw = config.get(key)
    if raw is None or not raw.strip():
        raise MissingRequiredConfigError(key)
    return raw.strip()


def _require_int(config: pulumi.Config, key: str) -> int:
    value = config.get_int(key)
    if value is None:
        raise MissingRequiredConfigError(key)
    return value


def _require_object(config: pulumi.Config, key: str) -> Any:
    """Structured (YAML list or mapping) value for key."""
    value = config.get_object(key)
    if value is None:
        raise MissingRequiredConfigError(key)
    return value


def _require_domain(config: pulumi.Config, key: str) -> str:
    return _require_str(config, key).rstrip(".").lower()


def _require_str_list(config: pulumi.Config, key: str) -> tuple[str, ...]:
    items = tuple(parse_email_list(_require_object(config, key)))
    if not items:
        raise MissingRequiredConfigError(key, "expected at least one value")
    return items


def _require_domain_list(config: pulumi.Config, key: str) -> tuple[str, ...]:
    return tuple(item.rstrip(".").lower() for item in parse_email_list(_require_object(config, key)))


def _require_challenge(config: pulumi.Config, key: str) -> DnsChallenge:
    raw = _require_object(config, key)
    if not isinstance(raw, dict):
        raise MissingRequiredConfigError(key, "expected an object with 'name' and 'value'")
    name, value = raw.get("name"), raw.get("value")
    if not name:
        raise MissingRequiredConfigError(f"{key}.name")
    if not value:
        raise MissingRequiredConfigError(f"{key}.value")
    return DnsChallenge(name=str(name), value=str(value))


def _optional_str(config: pulumi.Config, key: str) -> str | None:
    raw = config.get(key)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _optional_positive_float(config: pulumi.Config, key: str) -> float | None:
    value = config.get_float(key)
    if value is not None and value <= 0:
        raise MissingRequiredConfigError(key, f"expected a positive number, got {value!r}")
    return value


def _optional_bool(config: pulumi.Config, key: str) -> bool:
    return config.get_bool(key) or False


def _optional_domain_list(config: pulumi.Config, key: str) -> tuple[str, ...]:
    raw = config.get_object(key)
    return tuple(item.rstrip(".").lower() for item in parse_email_list(raw))


# (key, parser); parser receives (config, key) and returns value.
_CONFIG_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("app_name", _require_str),
    ("environment", _require_str),
    ("main_domain", _require_domain),
    ("redirect_domains", _require_domain_list),
    ("github_pages_default_domain", _require_domain),
    ("github_pages_challenge", _require_challenge),
    ("github_org_challenge", _require_challenge),
    ("main_txt_values", _require_str_list),
    ("health_check_search_string", _require_str),
    ("health_check_alarm_emails", _require_str_list),
    ("dnssec_alarm_emails", _require_str_list),
    ("log_bucket_expiration_days", _require_int),
    ("edge_region", _require_str),
    ("exchange_mx_host", _require_domain),
    ("dkim_challenge", _require_challenge),
    ("dmarc_rua_email", _require_str),
    ("dmarc_ruf_email", _require_str),
]

_OPTIONAL_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("redirect_certificate_arn", _optional_str),
    ("latency_threshold_ms", _optional_positive_float),
    ("accepted_dmarc_report_domains", _optional_domain_list),
    ("protect_resources", _optional_bool),
]


@dataclass(frozen=True)
class StackConfig:
    """
    Stack configuration from Pulumi config.

    Attributes:
        app_name: Tag value identifying this project's resources (required).
        environment: Environment label, e.g. "test" or "prod" (required).
        main_domain: Apex domain hosting the GitHub Pages site (required).
        redirect_domains: Apex domains redirecting to www.<main_domain>;
            may be an empty list (required).
        github_pages_default_domain: <org>.github.io domain the www CNAME
            points at (required).
        github_pages_challenge: GitHub Pages domain verification TXT record
            (required).
        github_org_challenge: GitHub organization domain verification TXT
            record (required).
        main_txt_values: Lines of the main apex TXT record, e.g. SPF and
            mail provider codes (required).
        health_check_search_string: Text the main www page must contain,
            within its first 5120 bytes (required).
        health_check_alarm_emails: Who is notified of health alarms (required).
        dnssec_alarm_emails: Who is notified of DNSSEC alarms (required).
        log_bucket_expiration_days: Days until access logs expire (required).
        edge_region: Region for DNSSEC keys, edge certificates and health
            check alarms; must be us-east-1 (required).
        exchange_mx_host: Exchange Online MX host (required).
        dkim_challenge: Brevo DKIM TXT record (required).
        dmarc_rua_email: DMARC aggregate report address (required).
        dmarc_ruf_email: DMARC failure report address (required).
        redirect_certificate_arn: Existing us-east-1 certificate for every
            redirect domain; issued per domain when omitted.
        latency_threshold_ms: Enables latency alarms on the main domain.
        accepted_dmarc_report_domains: Other domains allowed to send their
            DMARC reports to addresses on the main domain.
        protect_resources: Protect components from `pulumi destroy`.
    """

    app_name: str
    environment: str
    main_domain: str
    redirect_domains: tuple[str, ...]
    github_pages_default_domain: str
    github_pages_challenge: DnsChallenge
    github_org_challenge: DnsChallenge
    main_txt_values: tuple[str, ...]
    health_check_search_string: str
    health_check_alarm_emails: tuple[str, ...]
    dnssec_alarm_emails: tuple[str, ...]
    log_bucket_expiration_days: int
    edge_region: str
    exchange_mx_host: str
    dkim_challenge: DnsChallenge
    dmarc_rua_email: str
    dmarc_ruf_email: str
    redirect_certificate_arn: str | None = None
    latency_threshold_ms: float | None = None
    accepted_dmarc_report_domains: tuple[str, ...] = ()
    protect_resources: bool = False

    @classmethod
    def from_pulumi_config(cls, config: pulumi.Config) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config(). All keys in _CONFIG_SPEC are required.

        Raises:
            MissingRequiredConfigError: A required key is missing or blank.
            InvalidRegionError: A region-bound resource would be created
                outside us-east-1.
        """
        kwargs = {key: parser(config, key) for key, parser in _CONFIG_SPEC}
        kwargs.update({key: parser(config, key) for key, parser in _OPTIONAL_SPEC})
        stack_config = cls(**kwargs)
        stack_config.check_regions()
        return stack_config

    def check_regions(self) -> None:
        """
        Raise InvalidRegionError if a region-bound resource is misplaced.

        DNSSEC key material, health check metrics and CloudFront certificates
        only exist in us-east-1.
        """
        require_region(self.edge_region, DNSSEC_REGION, "edge_region (DNSSEC key material)")
        require_region(self.edge_region, METRICS_REGION, "edge_region (health check alarms)")
        if self.redirect_certificate_arn:
            try:
                certificate_region = arn_region(self.redirect_certificate_arn)
            except ValueError:
                raise MissingRequiredConfigError(
                    "redirect_certificate_arn",
                    f"expected a certificate ARN, got {self.redirect_certificate_arn!r}",
                ) from None
            require_region(certificate_region, EDGE_REGION, "redirect_certificate_arn")
        else:
            require_region(self.edge_region, EDGE_REGION, "edge_region (redirect certificates)")
