"""
GitHub Pages organization website: log bucket + main domain DNS records.

GitHub Pages hosts the site and issues its own certificate, so the only AWS
resources for the main domain are its Route 53 records (apex A/AAAA to the
GitHub Pages servers, www CNAME to the organization's github.io domain, CAA,
TXT verification records) and an S3 bucket that collects CloudFront and S3
access logs for the whole project. The ``log_bucket`` output is passed to the
redirect components.
"""

import pulumi
import pulumi_aws as aws

from components.records import create_records
from planning.models import DomainSpec, RecordSpec

ID: str = "ghpages:website:GithubPagesWebsite"

# Applied to the log bucket; it must never be readable from the internet.
S3_BLOCK_PUBLIC_ACCESS: dict[str, bool] = {
    "block_public_acls": True,
    "block_public_policy": True,
    "ignore_public_acls": True,
    "restrict_public_buckets": True,
}


class GithubPagesWebsite(pulumi.ComponentResource):
    """
    Log bucket and Route 53 records for the GitHub Pages website domain.

    Resources: Bucket, BucketPublicAccessBlock, BucketOwnershipControls,
    BucketAcl, optional BucketLifecycleConfiguration, and one Record per
    planned RecordSpec.
    """

    def __init__(
        self,
        name: str,
        domain: DomainSpec,
        records: list[RecordSpec],
        log_bucket_expiration_days: int | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the log bucket and the main domain's records.

        Args:
            name: Pulumi resource name prefix for the bucket and records.
            domain: The main DomainSpec; ``hosted_zone_ref`` is the Route 53
                zone id the records are written to.
            records: RecordSpecs planned for the main apex and www names.
            log_bucket_expiration_days: Days until log objects expire. None
                keeps logs forever.
            opts: Options for the component itself (e.g. protect).

        Outputs (set on self, registered for the component):
            log_bucket: Bucket receiving CloudFront and S3 access logs.
        """
        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        # CloudFront standard logging still writes through bucket ACLs, so the
        # bucket keeps ACLs enabled with owner-preferred object ownership.
        self.log_bucket = aws.s3.Bucket(
            resource_name=f"{name}-logs",
            force_destroy=True,
            opts=child_opts,
        )
        aws.s3.BucketPublicAccessBlock(
            resource_name=f"{name}-logs-block-public",
            bucket=self.log_bucket.id,
            opts=child_opts,
            **S3_BLOCK_PUBLIC_ACCESS,
        )
        ownership = aws.s3.BucketOwnershipControls(
            resource_name=f"{name}-logs-ownership",
            bucket=self.log_bucket.id,
            rule=aws.s3.BucketOwnershipControlsRuleArgs(
                object_ownership="BucketOwnerPreferred",
            ),
            opts=child_opts,
        )
        aws.s3.BucketAcl(
            resource_name=f"{name}-logs-acl",
            bucket=self.log_bucket.id,
            acl="log-delivery-write",
            opts=pulumi.ResourceOptions(parent=self, depends_on=[ownership]),
        )

        if log_bucket_expiration_days:
            aws.s3.BucketLifecycleConfiguration(
                resource_name=f"{name}-logs-lifecycle",
                bucket=self.log_bucket.id,
                rules=[
                    aws.s3.BucketLifecycleConfigurationRuleArgs(
                        id="expire-logs",
                        status="Enabled",
                        filter=aws.s3.BucketLifecycleConfigurationRuleFilterArgs(prefix=""),
                        expiration=aws.s3.BucketLifecycleConfigurationRuleExpirationArgs(
                            days=log_bucket_expiration_days,
                        ),
                    )
                ],
                opts=child_opts,
            )

        create_records(name, domain.hosted_zone_ref, records, child_opts)

        self.register_outputs(
            {
                "log_bucket": self.log_bucket.bucket,
            }
        )
