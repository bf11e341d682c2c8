"""
Pure planning core. Importable and testable without a Pulumi engine.

- **resolve**: main + redirect DomainSpecs -> apex/www SubdomainTargets.
- **build_records**: SubdomainTarget -> Route 53 RecordSpecs.
- **compose_alarms**: HealthSignals -> status, latency and composite
  AlarmRules.
- **build_email_records** / **build_parked_email_records**: SPF, DKIM,
  DMARC, BIMI and MX records.
"""

from planning.alarms import AlarmRule, LatencyThresholds, compose_alarms, render_alarm_rule
from planning.email import EmailSettings, build_email_records, build_parked_email_records
from planning.errors import (
    DuplicateDomainError,
    InvalidRegionError,
    MissingRequiredConfigError,
    PlanningError,
    UnknownDomainRoleError,
)
from planning.models import (
    AliasTarget,
    CheckKind,
    DnsChallenge,
    DomainRole,
    DomainSpec,
    HealthSignal,
    RecordSpec,
    RecordType,
    SubdomainTarget,
)
from planning.records import build_record_plan, build_records
from planning.topology import certificate_names, derive_health_signals, resolve

__all__ = [
    "AlarmRule",
    "AliasTarget",
    "CheckKind",
    "DnsChallenge",
    "DomainRole",
    "DomainSpec",
    "DuplicateDomainError",
    "EmailSettings",
    "HealthSignal",
    "InvalidRegionError",
    "LatencyThresholds",
    "MissingRequiredConfigError",
    "PlanningError",
    "RecordSpec",
    "RecordType",
    "SubdomainTarget",
    "UnknownDomainRoleError",
    "build_email_records",
    "build_parked_email_records",
    "build_record_plan",
    "build_records",
    "certificate_names",
    "compose_alarms",
    "derive_health_signals",
    "render_alarm_rule",
    "resolve",
]
