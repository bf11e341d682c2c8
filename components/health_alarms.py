"""
Route 53 health checks and CloudWatch alarms for the website and redirects.

One health check per HealthSignal: the main www name is checked over HTTPS
with SNI and must contain the expected page content; every other name only
needs to answer over HTTP (redirects return 301, which counts as healthy).
Metric and composite alarms are created from the rules the planning core
composes, and notify an SNS topic with email subscriptions.

Route 53 publishes health check metrics only in us-east-1, so every resource
here is created with the us-east-1 provider.
"""

import pulumi
import pulumi_aws as aws

from components._helpers import resource_name
from components.notifications import create_alarm_topic
from planning.alarms import (
    AlarmKind,
    AlarmMetric,
    AlarmRule,
    LatencyThresholds,
    compose_alarms,
    leaf_rule_name,
    render_alarm_rule,
)
from planning.errors import require_region
from planning.models import CheckKind, DomainRole, HealthSignal

ID: str = "ghpages:monitoring:HealthCheckAlarms"

METRICS_REGION = "us-east-1"
REQUEST_INTERVAL_SECONDS = 30
FAILURE_THRESHOLD = 3

# (statistic, comparison operator) per watched metric.
_METRIC_ALARM_SETTINGS: dict[AlarmMetric, tuple[str, str]] = {
    AlarmMetric.STATUS: ("Minimum", "LessThanThreshold"),
    AlarmMetric.LATENCY: ("Average", "GreaterThanThreshold"),
}


def health_check_args(
    signal: HealthSignal,
    measure_latency: bool,
) -> dict:
    """Route 53 HealthCheck inputs for one signal."""
    args = {
        "fqdn": signal.fqdn,
        "resource_path": "/",
        "request_interval": REQUEST_INTERVAL_SECONDS,
        "failure_threshold": FAILURE_THRESHOLD,
        "measure_latency": measure_latency,
    }
    if signal.check_kind is CheckKind.STATUS_AND_CONTENT_MATCH:
        # Search string must appear in the first 5120 bytes of the body.
        args.update(
            type="HTTPS_STR_MATCH",
            port=443,
            enable_sni=True,
            search_string=signal.expected_content,
        )
    else:
        args.update(type="HTTP", port=80)
    return args


class HealthCheckAlarms(pulumi.ComponentResource):
    """
    Health checks, metric alarms, composite alarms and their SNS topic.

    Resources: sns.Topic with email subscriptions, one route53.HealthCheck
    per signal, one cloudwatch.MetricAlarm per status/latency rule and one
    cloudwatch.CompositeAlarm per composite rule.
    """

    def __init__(
        self,
        name: str,
        signals: list[HealthSignal],
        subscribe_emails: list[str],
        region: str,
        provider: aws.Provider,
        latency: LatencyThresholds | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create health checks and alarms for ``signals``.

        Args:
            name: Pulumi resource name prefix; also prefixes alarm names.
            signals: Health signals in topology order.
            subscribe_emails: Addresses notified when an alarm fires.
            region: Region of ``provider``; must be us-east-1.
            provider: Provider all resources are created with.
            latency: Latency alarm settings for the main domain. None
                disables latency measurement and alarms.
            opts: Options for the component itself.

        Raises:
            InvalidRegionError: ``region`` is not us-east-1.

        Outputs (set on self, registered for the component):
            alarm_topic_arn: SNS topic notified by the alarms.
            alarm_names: Names of every CloudWatch alarm created.
        """
        require_region(region, METRICS_REGION, "Route 53 health check alarms")
        rules = compose_alarms(signals, latency)

        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self, provider=provider)

        topic = create_alarm_topic(f"{name}-topic", subscribe_emails, child_opts)

        health_checks: dict[str, aws.route53.HealthCheck] = {}
        for signal in signals:
            measure_latency = latency is not None and signal.target.role is DomainRole.MAIN
            health_checks[signal.fqdn] = aws.route53.HealthCheck(
                resource_name=resource_name(name, signal.fqdn),
                opts=child_opts,
                **health_check_args(signal, measure_latency),
            )

        def alarm_name(rule_name: str) -> str:
            return resource_name(name, rule_name)

        metric_alarms: list[aws.cloudwatch.MetricAlarm] = []
        alarm_names: list[str] = []
        for rule in rules:
            if rule.kind is AlarmKind.COMPOSITE:
                continue
            metric_alarms.append(
                self._metric_alarm(alarm_name(rule.name), rule, health_checks, topic, child_opts)
            )
            alarm_names.append(alarm_name(rule.name))

        composite_opts = pulumi.ResourceOptions(
            parent=self, provider=provider, depends_on=metric_alarms
        )
        for rule in rules:
            if rule.kind is not AlarmKind.COMPOSITE:
                continue
            aws.cloudwatch.CompositeAlarm(
                resource_name=alarm_name(rule.name),
                alarm_name=alarm_name(rule.name),
                alarm_description=rule.description,
                alarm_rule=render_alarm_rule(
                    rule.expression, lambda leaf: alarm_name(leaf_rule_name(leaf))
                ),
                actions_enabled=rule.actions_enabled,
                alarm_actions=[topic.arn],
                opts=composite_opts,
            )
            alarm_names.append(alarm_name(rule.name))

        self.alarm_topic_arn: pulumi.Output[str] = topic.arn
        self.alarm_names: list[str] = alarm_names
        self.register_outputs(
            {
                "alarm_topic_arn": self.alarm_topic_arn,
                "alarm_names": self.alarm_names,
            }
        )

    @staticmethod
    def _metric_alarm(
        name: str,
        rule: AlarmRule,
        health_checks: dict[str, aws.route53.HealthCheck],
        topic: aws.sns.Topic,
        opts: pulumi.ResourceOptions,
    ) -> aws.cloudwatch.MetricAlarm:
        leaf = rule.leaf
        statistic, comparison_operator = _METRIC_ALARM_SETTINGS[leaf.metric]
        return aws.cloudwatch.MetricAlarm(
            resource_name=name,
            name=name,
            alarm_description=rule.description,
            namespace="AWS/Route53",
            metric_name=leaf.metric.value,
            dimensions={"HealthCheckId": health_checks[leaf.signal.fqdn].id},
            statistic=statistic,
            period=rule.period_seconds,
            evaluation_periods=rule.evaluation_periods,
            comparison_operator=comparison_operator,
            threshold=rule.threshold,
            actions_enabled=rule.actions_enabled,
            alarm_actions=[topic.arn],
            opts=opts,
        )
