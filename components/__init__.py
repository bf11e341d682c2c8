"""
Pulumi components for the GitHub Pages website and its redirect domains.

Each concern is encapsulated in its own ComponentResource for clear ownership
and reuse. Records and alarms come from the pure ``planning`` package; the
components only turn plans into AWS resources:

- **GithubPagesWebsite**: log bucket + main domain records; exposes
  log_bucket for the redirects.
- **WebsiteRedirect**: ACM certificate, S3 redirect bucket, CloudFront and
  alias/CAA records for one redirect domain.
- **DnssecSigning**: KMS-backed key-signing key, zone signing and alarms.
- **EmailDns**: SPF, DKIM, DMARC, BIMI and Exchange records.
- **HealthCheckAlarms**: Route 53 health checks and CloudWatch alarms.
"""

from components.dnssec import DnssecSigning
from components.email_dns import EmailDns
from components.health_alarms import HealthCheckAlarms
from components.redirect import WebsiteRedirect
from components.tagging import register_app_tagging
from components.website import GithubPagesWebsite

__all__ = [
    "DnssecSigning",
    "EmailDns",
    "GithubPagesWebsite",
    "HealthCheckAlarms",
    "WebsiteRedirect",
    "register_app_tagging",
]
