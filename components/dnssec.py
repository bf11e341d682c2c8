"""
DNSSEC signing for one Route 53 hosted zone.

Route 53 signs the zone with a key-signing key (KSK) backed by an asymmetric
customer managed KMS key. The KMS key must be ECC_NIST_P256 with
SIGN_VERIFY usage and must live in us-east-1. Two CloudWatch alarms report
signing trouble: an internal DNSSEC failure, and a KSK that needs action
(e.g. the KMS key was disabled or its policy no longer allows Route 53 to
sign).

After the first deployment the DS record still has to be added at the
registrar; until then resolvers do not validate the signatures.
"""

import pulumi
import pulumi_aws as aws

from components._helpers import dnssec_key_policy, kms_alias_name
from planning.errors import require_region
from planning.models import DomainSpec

ID: str = "ghpages:dns:DnssecSigning"

DNSSEC_REGION = "us-east-1"

# Route 53 only accepts letters, digits and underscores in KSK names.
KSK_NAME = "key_signing_key"

DNSSEC_ALARM_METRICS: tuple[tuple[str, str], ...] = (
    ("DNSSECInternalFailure", "internal-failure"),
    ("DNSSECKeySigningKeysNeedingAction", "ksk-needs-action"),
)


class DnssecSigning(pulumi.ComponentResource):
    """
    KMS key, key-signing key, zone signing and DNSSEC alarms for one zone.

    Resources: kms.Key, kms.Alias, route53.KeySigningKey,
    route53.HostedZoneDnsSec, and one cloudwatch.MetricAlarm per entry in
    DNSSEC_ALARM_METRICS.
    """

    def __init__(
        self,
        name: str,
        domain: DomainSpec,
        region: str,
        provider: aws.Provider,
        account_id: pulumi.Input[str],
        alarm_topic_arn: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Enable DNSSEC signing for ``domain``'s hosted zone.

        Args:
            name: Pulumi resource name prefix.
            domain: Domain whose ``hosted_zone_ref`` is signed.
            region: Region of ``provider``; must be us-east-1.
            provider: Provider all resources are created with.
            account_id: AWS account id, for the KMS key policy.
            alarm_topic_arn: SNS topic notified by the DNSSEC alarms.
            opts: Options for the component itself.

        Raises:
            InvalidRegionError: ``region`` is not us-east-1.

        Outputs (set on self, registered for the component):
            key_arn: ARN of the KMS key backing the KSK.
            ds_record: DS record to add at the registrar.
        """
        require_region(region, DNSSEC_REGION, f"DNSSEC key material for {domain.apex}")

        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self, provider=provider)

        # Key rotation is not supported for asymmetric keys.
        key = aws.kms.Key(
            resource_name=f"{name}-ksk-key",
            description=(
                f"Master key for DNSSEC signing of the {domain.apex} and "
                f"{domain.www} domains"
            ),
            customer_master_key_spec="ECC_NIST_P256",
            key_usage="SIGN_VERIFY",
            enable_key_rotation=False,
            deletion_window_in_days=7,
            policy=pulumi.Output.from_input(account_id).apply(dnssec_key_policy),
            opts=child_opts,
        )
        aws.kms.Alias(
            resource_name=f"{name}-ksk-alias",
            name=kms_alias_name(domain.apex),
            target_key_id=key.key_id,
            opts=child_opts,
        )

        ksk = aws.route53.KeySigningKey(
            resource_name=f"{name}-ksk",
            hosted_zone_id=domain.hosted_zone_ref,
            key_management_service_arn=key.arn,
            name=KSK_NAME,
            status="ACTIVE",
            opts=child_opts,
        )
        # Signing can only be enabled once an active KSK exists.
        aws.route53.HostedZoneDnsSec(
            resource_name=f"{name}-signing",
            hosted_zone_id=ksk.hosted_zone_id,
            signing_status="SIGNING",
            opts=pulumi.ResourceOptions(parent=self, provider=provider, depends_on=[ksk]),
        )

        for metric_name, suffix in DNSSEC_ALARM_METRICS:
            aws.cloudwatch.MetricAlarm(
                resource_name=f"{name}-{suffix}",
                alarm_description=f"{metric_name} reported for {domain.apex}",
                namespace="AWS/Route53",
                metric_name=metric_name,
                dimensions={"HostedZoneId": domain.hosted_zone_ref},
                statistic="Maximum",
                period=300,
                evaluation_periods=1,
                comparison_operator="GreaterThanOrEqualToThreshold",
                threshold=1,
                treat_missing_data="notBreaching",
                alarm_actions=[alarm_topic_arn],
                opts=child_opts,
            )

        self.key_arn: pulumi.Output[str] = key.arn
        self.ds_record: pulumi.Output[str] = ksk.ds_record
        self.register_outputs({"key_arn": self.key_arn, "ds_record": self.ds_record})
