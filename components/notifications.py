"""
SNS topics that fan alarm notifications out to email addresses.
"""

import pulumi
import pulumi_aws as aws

from planning.errors import MissingRequiredConfigError


def create_alarm_topic(
    name: str,
    emails: list[str],
    opts: pulumi.ResourceOptions,
) -> aws.sns.Topic:
    """
    Create an SNS topic with one email subscription per address.

    Each address receives a confirmation email from AWS and gets no
    notifications until it confirms.

    Raises:
        MissingRequiredConfigError: ``emails`` is empty, so nobody would ever
            hear about the alarm.
    """
    if not emails:
        raise MissingRequiredConfigError(f"{name} emails", "at least one subscriber email is required")

    topic = aws.sns.Topic(resource_name=name, opts=opts)
    for index, email in enumerate(emails):
        aws.sns.TopicSubscription(
            resource_name=f"{name}-email-{index}",
            topic=topic.arn,
            protocol="email",
            endpoint=email,
            opts=opts,
        )
    return topic
