"""Tests for the record set builder"""

import pytest

from planning.errors import MissingRequiredConfigError, UnknownDomainRoleError
from planning.models import (
    AliasTarget,
    DnsChallenge,
    DomainSpec,
    RecordSpec,
    RecordType,
    SubdomainTarget,
)
from planning.records import (
    AMAZON_CERTIFICATE_AUTHORITIES,
    DEFAULT_TTL,
    GITHUB_PAGES_IPV4,
    GITHUB_PAGES_IPV6,
    HEALTH_CHECKED_CAA_TTL,
    LETS_ENCRYPT,
    VERIFICATION_TTL,
    assert_cname_exclusive,
    build_record_plan,
    build_records,
    caa_value,
)
from planning.topology import resolve
from tests.conftest import make_main, make_redirect

CDN = AliasTarget(name="d111111abcdef8.cloudfront.net", zone_id="Z2FDTNDATAQYW2")


def _by_type(records: list[RecordSpec], fqdn: str) -> dict[RecordType, RecordSpec]:
    return {r.type: r for r in records if r.fqdn == fqdn}


@pytest.fixture
def scenario_records():
    targets = resolve(make_main("example.com"), [make_redirect("example.net")])
    return build_record_plan(targets, {"example.net": CDN})


class TestScenario:
    def test_main_apex_points_at_github_pages(self, scenario_records):
        apex = _by_type(scenario_records, "example.com")
        assert apex[RecordType.A].values == GITHUB_PAGES_IPV4
        assert apex[RecordType.AAAA].values == GITHUB_PAGES_IPV6
        assert len(apex[RecordType.A].values) == 4
        assert len(apex[RecordType.AAAA].values) == 4
        assert apex[RecordType.A].ttl == DEFAULT_TTL

    def test_main_apex_caa_allows_amazon_and_lets_encrypt(self, scenario_records):
        caa = _by_type(scenario_records, "example.com")[RecordType.CAA]
        assert caa_value(LETS_ENCRYPT) in caa.values
        for authority in AMAZON_CERTIFICATE_AUTHORITIES:
            assert caa_value(authority) in caa.values

    def test_main_www_cname_only(self, scenario_records):
        www = _by_type(scenario_records, "www.example.com")
        assert set(www) == {RecordType.CNAME}
        assert www[RecordType.CNAME].values == ("example.github.io",)

    @pytest.mark.parametrize("fqdn", ["example.net", "www.example.net"])
    def test_redirect_alias_and_amazon_caa(self, scenario_records, fqdn):
        records = _by_type(scenario_records, fqdn)
        assert set(records) == {RecordType.A, RecordType.AAAA, RecordType.CAA}
        for record_type in (RecordType.A, RecordType.AAAA):
            assert records[record_type].alias == CDN
            assert records[record_type].ttl is None
        caa = records[RecordType.CAA]
        assert caa.values == tuple(caa_value(a) for a in AMAZON_CERTIFICATE_AUTHORITIES)
        assert caa_value(LETS_ENCRYPT) not in caa.values
        assert caa.ttl == HEALTH_CHECKED_CAA_TTL

    def test_deterministic(self):
        targets = resolve(make_main(), [make_redirect("example.net")])
        first = build_record_plan(targets, {"example.net": CDN})
        second = build_record_plan(resolve(make_main(), [make_redirect("example.net")]), {"example.net": CDN})
        assert first == second


class TestTxtRecords:
    def test_apex_txt_uses_verification_ttl(self, scenario_records):
        txt = _by_type(scenario_records, "example.com")[RecordType.TXT]
        assert txt.values == ("v=spf1 mx -all",)
        assert txt.ttl == VERIFICATION_TTL

    def test_challenge_placed_under_apex(self, scenario_records):
        challenge = _by_type(scenario_records, "_github-pages-challenge-example.example.com")
        assert challenge[RecordType.TXT].values == ("abc123",)
        assert challenge[RecordType.TXT].ttl == VERIFICATION_TTL

    def test_no_txt_values_no_apex_txt(self):
        targets = resolve(make_main(txt_values=()), [])
        records = build_records(targets[0])
        assert RecordType.TXT not in _by_type(records, "example.com")

    def test_empty_challenge_value(self):
        main = make_main(challenges=(DnsChallenge(name="_github-challenge-org", value=""),))
        with pytest.raises(MissingRequiredConfigError, match="_github-challenge-org"):
            build_records(resolve(main, [])[0])


class TestCnameCaaExclusivity:
    def test_no_caa_next_to_cname(self, scenario_records):
        cname_names = {r.fqdn for r in scenario_records if r.type is RecordType.CNAME}
        assert cname_names
        for record in scenario_records:
            if record.fqdn in cname_names:
                assert record.type is RecordType.CNAME

    def test_assert_cname_exclusive_raises(self):
        records = [
            RecordSpec(fqdn="www.example.com", type=RecordType.CNAME, values=("x",), ttl=60),
            RecordSpec(fqdn="www.example.com", type=RecordType.CAA, values=("y",), ttl=60),
        ]
        with pytest.raises(ValueError, match="www.example.com"):
            assert_cname_exclusive(records)


class TestFailures:
    def test_redirect_without_cdn_alias(self):
        targets = resolve(make_main(), [make_redirect("example.net")])
        with pytest.raises(MissingRequiredConfigError, match="example.net"):
            build_records(targets[2])

    def test_main_www_without_cname_target(self):
        targets = resolve(make_main(cname_target=None), [])
        with pytest.raises(MissingRequiredConfigError, match="github_pages_default_domain"):
            build_records(targets[1])

    def test_unknown_role(self):
        target = resolve(make_main(), [])[0]
        bogus = SubdomainTarget(
            fqdn=target.fqdn,
            owning_domain=DomainSpec(apex="example.com", role="parked"),
            record_kinds=frozenset(),
        )
        with pytest.raises(UnknownDomainRoleError, match="example.com"):
            build_records(bogus)


class TestRecordSpec:
    def test_requires_ttl_or_alias(self):
        with pytest.raises(ValueError):
            RecordSpec(fqdn="example.com", type=RecordType.A, values=("1.2.3.4",))

    def test_rejects_both(self):
        with pytest.raises(ValueError):
            RecordSpec(fqdn="example.com", type=RecordType.A, ttl=60, alias=CDN)

    def test_caa_value_format(self):
        assert caa_value("amazon.com") == '0 issue "amazon.com"'
