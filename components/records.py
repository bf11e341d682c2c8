"""
Route 53 record sets from planned RecordSpecs.

Shared by every component that writes DNS records, so all of them name their
record resources the same way: ``<prefix>-<PascalCaseFqdn>-<type>``. Names are
derived from the record's fqdn and type only, so adding a domain never renames
the records of another.
"""

import pulumi
import pulumi_aws as aws

from components._helpers import domain_to_pascal_case, resource_name, txt_value
from planning.models import RecordSpec, RecordType


def record_resource_name(
    prefix: str,
    record: RecordSpec,
) -> str:
    return resource_name(prefix, domain_to_pascal_case(record.fqdn), record.type.value.lower())


def _record_values(record: RecordSpec) -> list[str]:
    if record.type is RecordType.TXT:
        return [txt_value(value) for value in record.values]
    return list(record.values)


def create_record(
    prefix: str,
    zone_id: pulumi.Input[str],
    record: RecordSpec,
    opts: pulumi.ResourceOptions,
) -> aws.route53.Record:
    """
    Upsert one RecordSpec into the hosted zone ``zone_id``.

    ``allow_overwrite`` lets the first deploy adopt records that were created
    by hand before this project managed the zone.
    """
    if record.is_alias:
        return aws.route53.Record(
            resource_name=record_resource_name(prefix, record),
            zone_id=zone_id,
            name=record.fqdn,
            type=record.type.value,
            aliases=[
                aws.route53.RecordAliasArgs(
                    name=record.alias.name,
                    zone_id=record.alias.zone_id,
                    evaluate_target_health=False,
                )
            ],
            allow_overwrite=True,
            opts=opts,
        )
    return aws.route53.Record(
        resource_name=record_resource_name(prefix, record),
        zone_id=zone_id,
        name=record.fqdn,
        type=record.type.value,
        ttl=record.ttl,
        records=_record_values(record),
        allow_overwrite=True,
        opts=opts,
    )


def create_records(
    prefix: str,
    zone_id: pulumi.Input[str],
    records: list[RecordSpec],
    opts: pulumi.ResourceOptions,
) -> list[aws.route53.Record]:
    return [create_record(prefix, zone_id, record, opts) for record in records]
