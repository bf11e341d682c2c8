"""
Pure helpers for DNS values and resource naming. Testable without Pulumi runtime.

Used by the record, redirect, DNSSEC and health check components. No Pulumi
types; all functions accept and return plain Python types so they can be
unit-tested without a Pulumi stack.
"""

import json

# Route 53 rejects TXT strings longer than 255 characters; longer values must
# be split into several quoted strings within one record value.
TXT_CHUNK_LEN = 255


def to_pascal_case(
    label: str,
) -> str:
    return label[:1].upper() + label[1:]


def domain_to_pascal_case(
    domain: str,
) -> str:
    """
    Turn a DNS name into a PascalCase identifier.

    Used for resource names, e.g. "www.example.com" -> "WwwExampleCom".
    Hyphens and wildcard/underscore labels are kept readable:
    "_dmarc.my-site.org" -> "DmarcMySiteOrg".
    """
    words = []
    for label in domain.rstrip(".").split("."):
        words.extend(part for part in label.replace("_", "-").replace("*", "wildcard").split("-"))
    return "".join(to_pascal_case(word) for word in words if word)


def resource_name(
    prefix: str,
    *parts: str,
) -> str:
    """Join a component prefix and name parts with hyphens, e.g. "dnssec-ExampleCom-ksk"."""
    return "-".join([prefix, *(part for part in parts if part)])


def txt_value(
    value: str,
) -> str:
    """
    Route 53 TXT record value for the Pulumi provider.

    The provider adds the outer quotes; values longer than 255 characters
    (e.g. DKIM keys) are split into 255-character strings joined with
    ``""`` so Route 53 stores them as one multi-string record.
    """
    if len(value) <= TXT_CHUNK_LEN:
        return value
    chunks = [value[i : i + TXT_CHUNK_LEN] for i in range(0, len(value), TXT_CHUNK_LEN)]
    return '""'.join(chunks)


def kms_alias_name(
    domain: str,
) -> str:
    """
    KMS alias for a domain's DNSSEC key-signing key.

    KMS aliases need the "alias/" prefix and may not contain periods:
    "example.com" -> "alias/dnssec/example-com-ksk".
    """
    return f"alias/dnssec/{domain.rstrip('.').replace('.', '-')}-ksk"


def dnssec_key_policy(
    account_id: str,
) -> str:
    """
    KMS key policy allowing Route 53 DNSSEC to sign with the key.

    Adapted from the default policy the Route 53 console shows when enabling
    DNSSEC signing for a hosted zone.
    """
    dnssec_principal = {"Service": "dnssec-route53.amazonaws.com"}
    policy = {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Sid": "Enable root user to manage key",
                "Effect": "Allow",
                "Principal": {"AWS": f"arn:aws:iam::{account_id}:root"},
                "Action": "kms:*",
                "Resource": "*",
            },
            {
                "Sid": "Allow Route 53 DNSSEC service to work with key",
                "Effect": "Allow",
                "Principal": dnssec_principal,
                "Action": ["kms:DescribeKey", "kms:GetPublicKey", "kms:Sign"],
                "Resource": "*",
            },
            {
                "Sid": "Allow Route 53 DNSSEC service to create grants for AWS resources",
                "Effect": "Allow",
                "Principal": dnssec_principal,
                "Action": "kms:CreateGrant",
                "Resource": "*",
                "Condition": {"Bool": {"kms:GrantIsForAWSResource": "true"}},
            },
        ],
    }
    return json.dumps(policy)


def parse_email_list(
    raw: str | list[str] | None,
) -> list[str]:
    """
    Normalize an email list from config.

    Accepts a YAML list or a comma-separated string; blanks are dropped.
    """
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    return [item.strip() for item in items if item and item.strip()]


def arn_region(
    arn: str,
) -> str:
    """
    Region field of an ARN, e.g. "us-east-1" for an ACM certificate ARN.

    Raises ValueError for strings that are not ARNs.
    """
    parts = arn.split(":")
    if len(parts) < 6 or parts[0] != "arn":
        raise ValueError(f"not an ARN: {arn!r}")
    return parts[3]
