"""Tests for email authentication records"""

import pytest

from planning.email import (
    EXCHANGE_TTL,
    NULL_SPF,
    EmailSettings,
    build_email_records,
    build_parked_email_records,
    dmarc_policy,
)
from planning.errors import MissingRequiredConfigError
from planning.models import DnsChallenge, RecordType
from planning.records import DEFAULT_TTL, VERIFICATION_TTL

POLICY = dmarc_policy("rua@example.com", "ruf@example.com")


@pytest.fixture
def settings() -> EmailSettings:
    return EmailSettings(
        mx_host="example-com.mail.protection.outlook.com",
        dkim=DnsChallenge(name="mail._domainkey", value="k=rsa;p=MIGf"),
        dmarc_policy=POLICY,
        accepted_dmarc_report_domains=("example.net", "example.com"),
    )


def _by_fqdn(records):
    return {(r.fqdn, r.type): r for r in records}


class TestDmarcPolicy:
    def test_strict_policy(self):
        assert POLICY == (
            "v=DMARC1;p=reject;adkim=s;aspf=s;rf=afrf;"
            "rua=mailto:rua@example.com;ri=3600;ruf=mailto:ruf@example.com;fo=1;"
        )

    @pytest.mark.parametrize(
        "rua, ruf, field",
        [("", "ruf@example.com", "dmarc_rua_email"), ("rua@example.com", "", "dmarc_ruf_email")],
    )
    def test_missing_address(self, rua, ruf, field):
        with pytest.raises(MissingRequiredConfigError, match=field):
            dmarc_policy(rua, ruf)


class TestBuildEmailRecords:
    def test_authentication_records(self, settings):
        records = _by_fqdn(build_email_records("example.com", settings))
        assert records[("*.example.com", RecordType.TXT)].values == (NULL_SPF,)
        assert records[("*.example.com", RecordType.TXT)].ttl == VERIFICATION_TTL
        assert records[("mail._domainkey.example.com", RecordType.TXT)].values == ("k=rsa;p=MIGf",)
        assert records[("_dmarc.example.com", RecordType.TXT)].values == (POLICY,)
        assert records[("_dmarc.example.com", RecordType.TXT)].ttl == DEFAULT_TTL

    def test_default_bimi_logo(self, settings):
        bimi = _by_fqdn(build_email_records("example.com", settings))[
            ("default._bimi.example.com", RecordType.TXT)
        ]
        assert bimi.values == ("v=BIMI1; l=https://www.example.com/email-logo-v1.tiny-ps.svg; a=;",)

    def test_report_domains_skip_own_apex(self, settings):
        fqdns = [r.fqdn for r in build_email_records("example.com", settings)]
        assert "example.net._report._dmarc.example.com" in fqdns
        assert "example.com._report._dmarc.example.com" not in fqdns

    def test_exchange_records(self, settings):
        records = _by_fqdn(build_email_records("example.com", settings))
        mx = records[("example.com", RecordType.MX)]
        assert mx.values == ("0 example-com.mail.protection.outlook.com",)
        assert mx.ttl == EXCHANGE_TTL
        autodiscover = records[("autodiscover.example.com", RecordType.CNAME)]
        assert autodiscover.values == ("autodiscover.outlook.com",)
        assert autodiscover.ttl == EXCHANGE_TTL

    def test_no_apex_txt(self, settings):
        records = _by_fqdn(build_email_records("example.com", settings))
        assert ("example.com", RecordType.TXT) not in records

    def test_missing_mx_host(self, settings):
        broken = EmailSettings(mx_host="", dkim=settings.dkim, dmarc_policy=POLICY)
        with pytest.raises(MissingRequiredConfigError, match="exchange_mx_host"):
            build_email_records("example.com", broken)

    def test_missing_dkim(self, settings):
        broken = EmailSettings(
            mx_host=settings.mx_host,
            dkim=DnsChallenge(name="mail._domainkey", value=""),
            dmarc_policy=POLICY,
        )
        with pytest.raises(MissingRequiredConfigError, match="dkim_challenge"):
            build_email_records("example.com", broken)


class TestParkedEmailRecords:
    def test_rejects_all_mail(self):
        records = build_parked_email_records("example.net", POLICY)
        assert [(r.fqdn, r.values) for r in records] == [
            ("example.net", (NULL_SPF,)),
            ("*.example.net", (NULL_SPF,)),
            ("_dmarc.example.net", (POLICY,)),
        ]
        assert all(r.type is RecordType.TXT for r in records)
