"""Tests for pure helpers"""

import json

import pytest

from components import _helpers


class TestDomainToPascalCase:
    def test_www_name(self):
        assert _helpers.domain_to_pascal_case("www.example.com") == "WwwExampleCom"

    def test_hyphens_and_underscores(self):
        assert _helpers.domain_to_pascal_case("_dmarc.my-site.org") == "DmarcMySiteOrg"

    def test_wildcard(self):
        assert _helpers.domain_to_pascal_case("*.example.com") == "WildcardExampleCom"

    def test_trailing_dot_ignored(self):
        assert _helpers.domain_to_pascal_case("example.com.") == "ExampleCom"


class TestResourceName:
    def test_joins_parts(self):
        assert _helpers.resource_name("dnssec", "ExampleCom", "ksk") == "dnssec-ExampleCom-ksk"

    def test_skips_empty_parts(self):
        assert _helpers.resource_name("health", "", "www.example.com-status") == (
            "health-www.example.com-status"
        )


class TestTxtValue:
    def test_short_value_unchanged(self):
        assert _helpers.txt_value("v=spf1 -all") == "v=spf1 -all"

    def test_long_value_split(self):
        value = "a" * 300
        result = _helpers.txt_value(value)
        assert result == "a" * 255 + '""' + "a" * 45
        assert result.replace('""', "") == value

    def test_exactly_max_length(self):
        value = "b" * _helpers.TXT_CHUNK_LEN
        assert _helpers.txt_value(value) == value


class TestKmsAliasName:
    def test_replaces_every_dot(self):
        assert _helpers.kms_alias_name("www.example.com") == "alias/dnssec/www-example-com-ksk"

    def test_apex(self):
        assert _helpers.kms_alias_name("example.com.") == "alias/dnssec/example-com-ksk"


class TestDnssecKeyPolicy:
    def test_root_and_dnssec_service(self):
        policy = json.loads(_helpers.dnssec_key_policy("123456789012"))
        principals = [s["Principal"] for s in policy["Statement"]]
        assert {"AWS": "arn:aws:iam::123456789012:root"} in principals
        assert {"Service": "dnssec-route53.amazonaws.com"} in principals

    def test_grants_only_for_aws_resources(self):
        policy = json.loads(_helpers.dnssec_key_policy("123456789012"))
        grant = [s for s in policy["Statement"] if s["Action"] == "kms:CreateGrant"]
        assert grant[0]["Condition"] == {"Bool": {"kms:GrantIsForAWSResource": "true"}}


class TestParseEmailList:
    def test_comma_separated(self):
        assert _helpers.parse_email_list("a@example.com, b@example.com") == [
            "a@example.com",
            "b@example.com",
        ]

    def test_list_with_blanks(self):
        assert _helpers.parse_email_list(["a@example.com", " ", ""]) == ["a@example.com"]

    def test_none(self):
        assert _helpers.parse_email_list(None) == []


class TestArnRegion:
    def test_certificate_arn(self):
        arn = "arn:aws:acm:us-east-1:123456789012:certificate/abcd"
        assert _helpers.arn_region(arn) == "us-east-1"

    def test_not_an_arn(self):
        with pytest.raises(ValueError):
            _helpers.arn_region("us-east-1")
