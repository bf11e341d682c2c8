"""
Redirect domain: S3 website redirect behind CloudFront with an ACM certificate.

Requests to ``<apex>`` and ``www.<apex>`` reach a CloudFront distribution,
which forwards them to an S3 website endpoint that answers every request
with a redirect to ``https://<site_domain>``. CloudFront terminates TLS with
an ACM certificate covering both names; ACM certificates used by CloudFront
must live in us-east-1, so the certificate is issued (or, if an ARN is
configured, checked) in the edge region.

DNS records come from the planning core: alias A/AAAA records to the
distribution and an Amazon-only CAA record on both names.
"""

import pulumi
import pulumi_aws as aws

from components._helpers import arn_region
from components.records import create_records
from components.website import S3_BLOCK_PUBLIC_ACCESS
from planning.errors import require_region
from planning.models import AliasTarget, DomainSpec, SubdomainTarget
from planning.records import build_records
from planning.topology import certificate_names

ID: str = "ghpages:website:WebsiteRedirect"

EDGE_REGION = "us-east-1"
ORIGIN_ID = "s3-redirect-origin"


class WebsiteRedirect(pulumi.ComponentResource):
    """
    Redirect bucket + CloudFront distribution + DNS for one redirect domain.

    Resources: Bucket, BucketPublicAccessBlock, BucketWebsiteConfiguration,
    BucketLogging, optional Certificate with validation records and
    CertificateValidation, Distribution, and the planned Records.
    """

    def __init__(
        self,
        name: str,
        domain: DomainSpec,
        targets: list[SubdomainTarget],
        site_domain: str,
        log_bucket: aws.s3.Bucket,
        edge_region: str,
        edge_provider: aws.Provider,
        certificate_arn: str | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the redirect for ``domain``.

        Args:
            name: Pulumi resource name prefix.
            domain: Redirect DomainSpec; ``hosted_zone_ref`` is its zone id.
            targets: The domain's apex and www SubdomainTargets.
            site_domain: Host every request is redirected to (e.g.
                "www.example.com").
            log_bucket: Bucket receiving S3 access logs and CloudFront logs.
            edge_region: Region of ``edge_provider``; must be us-east-1.
            edge_provider: Provider used for the ACM certificate.
            certificate_arn: Existing certificate covering both names. When
                None a DNS-validated certificate is issued.
            opts: Options for the component itself.

        Raises:
            InvalidRegionError: The certificate is not in us-east-1.

        Outputs (set on self, registered for the component):
            cdn_domain_name: CloudFront domain of the distribution.
            certificate_arn: ARN of the certificate the distribution uses.
        """
        # Region checks run before anything is registered.
        if certificate_arn:
            require_region(arn_region(certificate_arn), EDGE_REGION, f"{domain.apex} certificate")
        else:
            require_region(edge_region, EDGE_REGION, f"{domain.apex} certificate")

        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        edge_opts = pulumi.ResourceOptions(parent=self, provider=edge_provider)

        if certificate_arn:
            pulumi.log.info(f"Using configured certificate for {domain.apex}: {certificate_arn}")
            cert_arn: pulumi.Input[str] = certificate_arn
            cdn_depends_on = []
        else:
            validation = self._issue_certificate(name, domain, edge_opts, child_opts)
            cert_arn = validation.certificate_arn
            cdn_depends_on = [validation]

        # Bucket name must equal the host name for S3 website redirects.
        bucket = aws.s3.Bucket(
            resource_name=f"{name}-bucket",
            bucket=domain.apex,
            force_destroy=True,
            opts=child_opts,
        )
        aws.s3.BucketPublicAccessBlock(
            resource_name=f"{name}-bucket-block-public",
            bucket=bucket.id,
            opts=child_opts,
            **S3_BLOCK_PUBLIC_ACCESS,
        )
        website = aws.s3.BucketWebsiteConfiguration(
            resource_name=f"{name}-website",
            bucket=bucket.id,
            redirect_all_requests_to=aws.s3.BucketWebsiteConfigurationRedirectAllRequestsToArgs(
                host_name=site_domain,
                protocol="https",
            ),
            opts=child_opts,
        )
        aws.s3.BucketLogging(
            resource_name=f"{name}-bucket-logging",
            bucket=bucket.id,
            target_bucket=log_bucket.id,
            target_prefix=f"{domain.apex}/",
            opts=child_opts,
        )

        # S3 website endpoints only speak HTTP.
        origins = [
            aws.cloudfront.DistributionOriginArgs(
                domain_name=website.website_endpoint,
                origin_id=ORIGIN_ID,
                custom_origin_config=aws.cloudfront.DistributionOriginCustomOriginConfigArgs(
                    http_port=80,
                    https_port=443,
                    origin_protocol_policy="http-only",
                    origin_ssl_protocols=["TLSv1.2"],
                ),
            )
        ]
        forwarded_values = aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
            query_string=False,
            cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(
                forward="none",
            ),
        )
        default_cache_behavior = aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
            target_origin_id=ORIGIN_ID,
            viewer_protocol_policy="redirect-to-https",
            allowed_methods=["GET", "HEAD", "OPTIONS"],
            cached_methods=["GET", "HEAD", "OPTIONS"],
            compress=True,
            forwarded_values=forwarded_values,
        )
        restrictions = aws.cloudfront.DistributionRestrictionsArgs(
            geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                restriction_type="none",
            ),
        )
        viewer_certificate = aws.cloudfront.DistributionViewerCertificateArgs(
            acm_certificate_arn=cert_arn,
            ssl_support_method="sni-only",
            minimum_protocol_version="TLSv1.2_2021",
        )
        logging_config = aws.cloudfront.DistributionLoggingConfigArgs(
            bucket=log_bucket.bucket_domain_name,
            prefix=f"{domain.apex}-redirect-cdn/",
            include_cookies=True,
        )

        self.distribution = aws.cloudfront.Distribution(
            resource_name=f"{name}-cdn",
            comment=f"CDN for routing [www.]{domain.apex} requests",
            enabled=True,
            aliases=[target.fqdn for target in targets],
            http_version="http1.1",
            is_ipv6_enabled=True,
            price_class="PriceClass_100",
            origins=origins,
            default_cache_behavior=default_cache_behavior,
            restrictions=restrictions,
            viewer_certificate=viewer_certificate,
            logging_config=logging_config,
            opts=pulumi.ResourceOptions(parent=self, depends_on=cdn_depends_on),
        )

        cdn_alias = AliasTarget(
            name=self.distribution.domain_name,
            zone_id=self.distribution.hosted_zone_id,
        )
        records = [record for target in targets for record in build_records(target, cdn_alias)]
        create_records(name, domain.hosted_zone_ref, records, child_opts)

        self.cdn_domain_name: pulumi.Output[str] = self.distribution.domain_name
        self.certificate_arn: pulumi.Output[str] = pulumi.Output.from_input(cert_arn)
        self.register_outputs(
            {
                "cdn_domain_name": self.cdn_domain_name,
                "certificate_arn": self.certificate_arn,
            }
        )

    def _issue_certificate(
        self,
        name: str,
        domain: DomainSpec,
        edge_opts: pulumi.ResourceOptions,
        child_opts: pulumi.ResourceOptions,
    ) -> aws.acm.CertificateValidation:
        """DNS-validated certificate for www.<apex> with <apex> as SAN."""
        primary, sans = certificate_names(domain)
        certificate = aws.acm.Certificate(
            resource_name=f"{name}-cert",
            domain_name=primary,
            subject_alternative_names=list(sans),
            validation_method="DNS",
            opts=edge_opts,
        )

        # One validation record per certificate name, indexed in sorted order.
        validation_fqdns = []
        for index, fqdn in enumerate(sorted([primary, *sans])):
            option = certificate.domain_validation_options.apply(
                lambda options, fqdn=fqdn: next(o for o in options if o.domain_name == fqdn)
            )
            record = aws.route53.Record(
                resource_name=f"{name}-cert-validation-{index}",
                zone_id=domain.hosted_zone_ref,
                name=option.apply(lambda o: o.resource_record_name),
                type=option.apply(lambda o: o.resource_record_type),
                records=[option.apply(lambda o: o.resource_record_value)],
                ttl=60,
                allow_overwrite=True,
                opts=child_opts,
            )
            validation_fqdns.append(record.fqdn)

        return aws.acm.CertificateValidation(
            resource_name=f"{name}-cert-validation",
            certificate_arn=certificate.arn,
            validation_record_fqdns=validation_fqdns,
            opts=edge_opts,
        )
