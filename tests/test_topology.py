"""Tests for the domain topology resolver"""

import pytest

from planning.errors import DuplicateDomainError, MissingRequiredConfigError, UnknownDomainRoleError
from planning.models import CheckKind, DomainRole, RecordType
from planning.topology import (
    certificate_names,
    derive_health_signals,
    normalize_apex,
    record_kinds_for,
    resolve,
)
from tests.conftest import SEARCH_STRING, make_main, make_redirect


class TestResolve:
    def test_scenario_one_redirect(self):
        targets = resolve(make_main("example.com"), [make_redirect("example.net")])
        assert [t.fqdn for t in targets] == [
            "example.com",
            "www.example.com",
            "example.net",
            "www.example.net",
        ]

    def test_count_is_two_per_domain(self):
        for count in range(4):
            redirects = [make_redirect(f"example{i}.net") for i in range(count)]
            targets = resolve(make_main(), redirects)
            assert len(targets) == 2 * (1 + count)

    def test_every_apex_appears_twice(self, targets, main_domain, redirect_domains):
        for domain in [main_domain, *redirect_domains]:
            owned = [t for t in targets if t.owning_domain is domain]
            assert [t.fqdn for t in owned] == [domain.apex, f"www.{domain.apex}"]

    def test_zero_redirects(self):
        targets = resolve(make_main(), [])
        assert [t.fqdn for t in targets] == ["example.com", "www.example.com"]

    def test_deterministic(self, main_domain, redirect_domains):
        first = resolve(main_domain, redirect_domains)
        second = resolve(main_domain, redirect_domains)
        assert first == second
        assert [t.fqdn for t in first] == [t.fqdn for t in second]

    def test_preserves_redirect_order(self):
        redirects = [make_redirect("b.org"), make_redirect("a.net")]
        targets = resolve(make_main(), redirects)
        assert [t.fqdn for t in targets][2:] == ["b.org", "www.b.org", "a.net", "www.a.net"]

    def test_duplicate_redirect_of_main_rejected(self):
        with pytest.raises(DuplicateDomainError) as exc_info:
            resolve(make_main("a.com"), [make_redirect("a.com")])
        assert exc_info.value.apex == "a.com"
        assert "a.com" in str(exc_info.value)

    def test_duplicate_between_redirects_rejected(self):
        with pytest.raises(DuplicateDomainError, match="b.net"):
            resolve(make_main(), [make_redirect("b.net"), make_redirect("b.net")])

    def test_main_with_redirect_role_rejected(self):
        with pytest.raises(UnknownDomainRoleError):
            resolve(make_redirect("example.com"), [])

    def test_redirect_with_main_role_rejected(self):
        with pytest.raises(UnknownDomainRoleError, match="example.net"):
            resolve(make_main(), [make_main("example.net")])

    def test_uppercase_apex_rejected(self):
        with pytest.raises(MissingRequiredConfigError):
            resolve(make_main("Example.com"), [])

    def test_record_kinds(self, targets):
        kinds = {t.fqdn: t.record_kinds for t in targets}
        assert kinds["www.example.com"] == frozenset({RecordType.CNAME})
        assert RecordType.CAA in kinds["example.com"]
        assert RecordType.CAA in kinds["www.example.net"]
        assert RecordType.CNAME not in kinds["www.example.net"]


class TestNormalizeApex:
    def test_lowercases_and_strips_dot(self):
        assert normalize_apex("Example.COM.") == "example.com"

    @pytest.mark.parametrize("apex", ["", "  ", "com", "www.example.com", "example..com"])
    def test_rejects_invalid(self, apex):
        with pytest.raises(MissingRequiredConfigError):
            normalize_apex(apex)


class TestRecordKindsFor:
    def test_unknown_role(self):
        with pytest.raises(UnknownDomainRoleError):
            record_kinds_for("parked", False, "example.com")

    def test_redirect_apex_and_www_match(self):
        assert record_kinds_for(DomainRole.REDIRECT, False) == record_kinds_for(
            DomainRole.REDIRECT, True
        )


class TestCertificateNames:
    def test_www_primary_apex_san(self):
        assert certificate_names(make_redirect("example.net")) == (
            "www.example.net",
            ("example.net",),
        )


class TestDeriveHealthSignals:
    def test_only_main_www_matches_content(self, signals):
        content = [s for s in signals if s.check_kind is CheckKind.STATUS_AND_CONTENT_MATCH]
        assert [s.fqdn for s in content] == ["www.example.com"]
        assert content[0].expected_content == SEARCH_STRING

    def test_others_status_only(self, signals):
        others = [s for s in signals if s.fqdn != "www.example.com"]
        assert len(others) == 5
        assert all(s.check_kind is CheckKind.STATUS_ONLY for s in others)
        assert all(s.expected_content is None for s in others)

    def test_one_signal_per_target_in_order(self, targets, signals):
        assert [s.fqdn for s in signals] == [t.fqdn for t in targets]

    def test_missing_search_string(self, targets):
        with pytest.raises(MissingRequiredConfigError, match="health_check_search_string"):
            derive_health_signals(targets, "")
