"""
Email authentication DNS records.

The main domain gets its DKIM, DMARC, BIMI, MX and Exchange records; each
redirect domain gets SPF/DMARC records declaring that it sends no mail at all.
"""

import pulumi

from components.records import create_records
from planning.email import EmailSettings, build_email_records, build_parked_email_records
from planning.models import DomainSpec

ID: str = "ghpages:dns:EmailDns"


class EmailDns(pulumi.ComponentResource):
    """Route 53 email records for the main domain and the redirect domains."""

    def __init__(
        self,
        name: str,
        main: DomainSpec,
        redirects: list[DomainSpec],
        settings: EmailSettings,
        opts: pulumi.ResourceOptions | None = None,
    ):
        main_records = build_email_records(main.apex, settings)
        parked = [
            (redirect, build_parked_email_records(redirect.apex, settings.dmarc_policy))
            for redirect in redirects
        ]

        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        create_records(name, main.hosted_zone_ref, main_records, child_opts)
        for redirect, records in parked:
            create_records(name, redirect.hosted_zone_ref, records, child_opts)

        self.register_outputs({})
