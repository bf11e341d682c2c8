"""
Email authentication records (SPF, DKIM, DMARC, BIMI, MX).

The main domain sends mail through Brevo (formerly Sendinblue) and receives it
through Microsoft Exchange. Redirect domains never send mail, so they get
"parked" records telling receivers to reject anything claiming to be from
them. The main apex TXT record (which carries the SPF policy) is built by
``planning.records`` together with the other apex records.
"""

from dataclasses import dataclass

from planning.errors import MissingRequiredConfigError
from planning.models import DnsChallenge, RecordSpec, RecordType
from planning.records import DEFAULT_TTL, VERIFICATION_TTL

EXCHANGE_TTL = 3600
NULL_SPF = "v=spf1 -all"

# Microsoft 365 "Basic Mobility & Security" and autodiscover.
EXCHANGE_CNAMES: tuple[tuple[str, str], ...] = (
    ("autodiscover", "autodiscover.outlook.com"),
    ("enterpriseregistration", "enterpriseregistration.windows.net"),
    ("enterpriseenrollment", "enterpriseenrollment.manage.microsoft.com"),
)


def dmarc_policy(rua_email: str, ruf_email: str) -> str:
    """
    Strict DMARC policy with aggregate and failure reporting.

    Mail failing DMARC is rejected outright; DKIM and SPF domains must
    match the From domain exactly. See RFC 7489 section 6.3.
    """
    if not rua_email:
        raise MissingRequiredConfigError("dmarc_rua_email")
    if not ruf_email:
        raise MissingRequiredConfigError("dmarc_ruf_email")
    return (
        "v=DMARC1;"
        "p=reject;"
        "adkim=s;aspf=s;"
        "rf=afrf;"
        f"rua=mailto:{rua_email};"
        "ri=3600;"
        f"ruf=mailto:{ruf_email};"
        "fo=1;"
    )


@dataclass(frozen=True)
class EmailSettings:
    """
    Mail-related configuration for the main domain.

    Attributes:
        mx_host: Exchange Online mail server (e.g.
            "example-com.mail.protection.outlook.com").
        dkim: Brevo DKIM key, usually at "mail._domainkey".
        dmarc_policy: Value of the _dmarc TXT record.
        accepted_dmarc_report_domains: Other domains whose DMARC reports may
            be sent to addresses on this domain (RFC 7489 section 7.1).
        bimi_logo_url: SVG Tiny PS logo shown by BIMI-aware mail clients.
    """

    mx_host: str
    dkim: DnsChallenge
    dmarc_policy: str
    accepted_dmarc_report_domains: tuple[str, ...] = ()
    bimi_logo_url: str | None = None


def build_email_records(apex: str, settings: EmailSettings) -> list[RecordSpec]:
    """Email records for the main domain, excluding the apex TXT record."""
    if not settings.mx_host:
        raise MissingRequiredConfigError("exchange_mx_host", f"MX host for {apex} is missing")
    if not settings.dkim.value:
        raise MissingRequiredConfigError("dkim_challenge", f"DKIM key for {apex} is missing")

    bimi_logo_url = settings.bimi_logo_url or f"https://www.{apex}/email-logo-v1.tiny-ps.svg"
    records = [
        RecordSpec(fqdn=f"*.{apex}", type=RecordType.TXT, values=(NULL_SPF,), ttl=VERIFICATION_TTL),
        RecordSpec(
            fqdn=f"{settings.dkim.name}.{apex}",
            type=RecordType.TXT,
            values=(settings.dkim.value,),
            ttl=DEFAULT_TTL,
        ),
        RecordSpec(
            fqdn=f"_dmarc.{apex}",
            type=RecordType.TXT,
            values=(settings.dmarc_policy,),
            ttl=DEFAULT_TTL,
        ),
        RecordSpec(
            fqdn=f"default._bimi.{apex}",
            type=RecordType.TXT,
            values=(f"v=BIMI1; l={bimi_logo_url}; a=;",),
            ttl=DEFAULT_TTL,
        ),
    ]
    for domain in settings.accepted_dmarc_report_domains:
        if domain == apex:
            continue
        records.append(
            RecordSpec(
                fqdn=f"{domain}._report._dmarc.{apex}",
                type=RecordType.TXT,
                values=("v=DMARC1",),
                ttl=DEFAULT_TTL,
            )
        )
    records.append(
        RecordSpec(fqdn=apex, type=RecordType.MX, values=(f"0 {settings.mx_host}",), ttl=EXCHANGE_TTL)
    )
    for name, target in EXCHANGE_CNAMES:
        records.append(
            RecordSpec(fqdn=f"{name}.{apex}", type=RecordType.CNAME, values=(target,), ttl=EXCHANGE_TTL)
        )
    return records


def build_parked_email_records(apex: str, policy: str) -> list[RecordSpec]:
    """Records for a domain that never sends mail."""
    return [
        RecordSpec(fqdn=apex, type=RecordType.TXT, values=(NULL_SPF,), ttl=VERIFICATION_TTL),
        RecordSpec(fqdn=f"*.{apex}", type=RecordType.TXT, values=(NULL_SPF,), ttl=VERIFICATION_TTL),
        RecordSpec(fqdn=f"_dmarc.{apex}", type=RecordType.TXT, values=(policy,), ttl=DEFAULT_TTL),
    ]
