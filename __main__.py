"""
GitHub Pages organization website - DNS, redirects, DNSSEC and monitoring.

Plans the domain topology with the pure ``planning`` package, then wires the
components using Pulumi config and output chaining:

- **GithubPagesWebsite**: main domain records (GitHub Pages A/AAAA, www
  CNAME, CAA, verification TXT) and the shared access log bucket.
- **WebsiteRedirect**: one per redirect domain; S3 redirect + CloudFront
  with an ACM certificate, alias and CAA records. Logs go to the website's
  log bucket.
- **DnssecSigning**: one per domain (main and redirects), in us-east-1.
- **EmailDns**: SPF/DKIM/DMARC/BIMI/MX for the main domain, "no mail"
  records for the redirect domains.
- **HealthCheckAlarms**: Route 53 health checks and CloudWatch alarms, in
  us-east-1.

Every hosted zone must already exist; zones are looked up by domain name.

Stack exports: main_domain, redirect_domains, redirect_cdn_domains,
health_alarm_topic_arn, dnssec_ds_records.
"""

import pulumi
import pulumi_aws as aws

from components import (
    DnssecSigning,
    EmailDns,
    GithubPagesWebsite,
    HealthCheckAlarms,
    WebsiteRedirect,
    register_app_tagging,
)
from components._helpers import domain_to_pascal_case
from components.notifications import create_alarm_topic
from config import StackConfig
from planning import (
    DomainRole,
    DomainSpec,
    EmailSettings,
    LatencyThresholds,
    build_record_plan,
    derive_health_signals,
    resolve,
)
from planning.email import dmarc_policy


def _hosted_zone_id(domain: str) -> pulumi.Output[str]:
    return aws.route53.get_zone_output(name=domain, private_zone=False).zone_id


def _component_name(prefix: str, domain: str) -> str:
    return f"{prefix}-{domain_to_pascal_case(domain)}"


def main():
    """
    Plan the topology, then build every component and export stack outputs.

    Config loading (including the us-east-1 region checks) and planning
    (topology, main domain records, health signals, email records) run
    before the first resource is registered, so configuration errors abort
    the run without touching any cloud resource.
    """
    config = StackConfig.from_pulumi_config(pulumi.Config())
    pulumi.log.info(
        f"Planning {config.main_domain} with {len(config.redirect_domains)} redirect "
        f"domain(s) ({config.environment})"
    )

    main_domain = DomainSpec(
        apex=config.main_domain,
        role=DomainRole.MAIN,
        hosted_zone_ref=_hosted_zone_id(config.main_domain),
        txt_values=config.main_txt_values,
        challenges=(config.github_pages_challenge, config.github_org_challenge),
        cname_target=config.github_pages_default_domain,
    )
    redirects = [
        DomainSpec(apex=apex, role=DomainRole.REDIRECT, hosted_zone_ref=_hosted_zone_id(apex))
        for apex in config.redirect_domains
    ]

    targets = resolve(main_domain, redirects)
    main_targets = [t for t in targets if t.owning_domain is main_domain]
    main_records = build_record_plan(main_targets)
    signals = derive_health_signals(targets, config.health_check_search_string)
    latency = (
        LatencyThresholds(time_to_first_byte_ms=config.latency_threshold_ms)
        if config.latency_threshold_ms is not None
        else None
    )
    email_settings = EmailSettings(
        mx_host=config.exchange_mx_host,
        dkim=config.dkim_challenge,
        dmarc_policy=dmarc_policy(config.dmarc_rua_email, config.dmarc_ruf_email),
        accepted_dmarc_report_domains=config.accepted_dmarc_report_domains,
    )

    register_app_tagging(config.app_name)
    component_opts = pulumi.ResourceOptions(protect=config.protect_resources)
    edge_provider = aws.Provider("edge", region=config.edge_region)

    pulumi.log.info("Creating website records and log bucket...")
    website = GithubPagesWebsite(
        name=_component_name("website", main_domain.apex),
        domain=main_domain,
        records=main_records,
        log_bucket_expiration_days=config.log_bucket_expiration_days,
        opts=component_opts,
    )

    pulumi.log.info("Creating redirect domains...")
    redirect_components = [
        WebsiteRedirect(
            name=_component_name("redirect", redirect.apex),
            domain=redirect,
            targets=[t for t in targets if t.owning_domain is redirect],
            site_domain=main_domain.www,
            log_bucket=website.log_bucket,
            edge_region=config.edge_region,
            edge_provider=edge_provider,
            certificate_arn=config.redirect_certificate_arn,
            opts=component_opts,
        )
        for redirect in redirects
    ]

    pulumi.log.info("Creating DNSSEC signing...")
    dnssec_topic = create_alarm_topic(
        "dnssec-alarms",
        list(config.dnssec_alarm_emails),
        pulumi.ResourceOptions(provider=edge_provider),
    )
    account_id = aws.get_caller_identity_output().account_id
    dnssec_components = [
        DnssecSigning(
            name=_component_name("dnssec", domain.apex),
            domain=domain,
            region=config.edge_region,
            provider=edge_provider,
            account_id=account_id,
            alarm_topic_arn=dnssec_topic.arn,
            opts=component_opts,
        )
        for domain in [main_domain, *redirects]
    ]

    pulumi.log.info("Creating email records...")
    EmailDns(
        name=_component_name("email", main_domain.apex),
        main=main_domain,
        redirects=redirects,
        settings=email_settings,
        opts=component_opts,
    )

    pulumi.log.info("Creating health checks and alarms...")
    health = HealthCheckAlarms(
        name="health",
        signals=signals,
        subscribe_emails=list(config.health_check_alarm_emails),
        region=config.edge_region,
        provider=edge_provider,
        latency=latency,
        opts=component_opts,
    )

    for output_name, value in [
        ("main_domain", main_domain.apex),
        ("redirect_domains", [redirect.apex for redirect in redirects]),
        (
            "redirect_cdn_domains",
            {r.apex: c.cdn_domain_name for r, c in zip(redirects, redirect_components)},
        ),
        ("health_alarm_topic_arn", health.alarm_topic_arn),
        (
            "dnssec_ds_records",
            {
                d.apex: c.ds_record
                for d, c in zip([main_domain, *redirects], dnssec_components)
            },
        ),
    ]:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
