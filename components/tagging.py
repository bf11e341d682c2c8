"""
App-wide resource tagging.

Registers a stack transformation that tags every taggable AWS resource with
the app name, its Pulumi resource name and type, and the stack. Explicit
tags set on a resource win over these defaults.
"""

import pulumi

# AWS resource types created by this project that accept a ``tags`` input.
TAGGABLE_TYPES: frozenset[str] = frozenset(
    {
        "aws:acm/certificate:Certificate",
        "aws:cloudfront/distribution:Distribution",
        "aws:cloudwatch/compositeAlarm:CompositeAlarm",
        "aws:cloudwatch/metricAlarm:MetricAlarm",
        "aws:kms/key:Key",
        "aws:route53/healthCheck:HealthCheck",
        "aws:s3/bucket:Bucket",
        "aws:sns/topic:Topic",
    }
)


def app_tags(
    app_name: str,
    resource_name: str,
    resource_type: str,
    stack: str,
) -> dict[str, str]:
    return {
        "app": app_name,
        "pulumi-resource-name": resource_name,
        "pulumi-resource-type": resource_type,
        "pulumi-stack": stack,
    }


def merge_tags(
    props: dict,
    defaults: dict[str, str],
) -> dict:
    """Return a copy of ``props`` whose ``tags`` include ``defaults``."""
    merged = dict(props)
    merged["tags"] = {**defaults, **(props.get("tags") or {})}
    return merged


def register_app_tagging(app_name: str) -> None:
    """Tag every taggable resource registered after this call."""
    stack = pulumi.get_stack()

    def transform(
        args: pulumi.ResourceTransformationArgs,
    ) -> pulumi.ResourceTransformationResult | None:
        if args.type_ not in TAGGABLE_TYPES:
            return None
        defaults = app_tags(app_name, args.name, args.type_, stack)
        return pulumi.ResourceTransformationResult(
            props=merge_tags(args.props, defaults),
            opts=args.opts,
        )

    pulumi.runtime.register_stack_transformation(transform)
