"""
Health/Alarm Composer: CloudWatch alarm rules over Route 53 health checks.

Each HealthSignal gets a status alarm on the minimum ``HealthCheckStatus``
over one period. The main www name is the website itself, so its alarm
fires after a single bad period; every other name is a redirect and waits
for three consecutive bad periods.

Two composite rules sit on top:

- ``MainUnhealthyButRedirectsOK``: AND(main down, OR(redirect alarms)). The
  main site is down and users on the redirect domains are starting to see
  failures too.
- ``RedirectsUnhealthyMainOK``: AND(NOT(main down), OR(redirect alarms)).
  Only redirect domains are failing (e.g. CDN or certificate trouble).

The two are never true at the same time. "Redirect alarms" are all status
alarms except the main www one, so the main apex is always among them; with
no redirect domains the inner OR() holds the main apex alarm alone. Only a
main-www-only signal list leaves it empty, and the empty OR() is the constant
FALSE, so both composites stay in OK.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Union

from planning.errors import MissingRequiredConfigError
from planning.models import DomainRole, HealthSignal

MAIN_UNHEALTHY_BUT_REDIRECTS_OK = "MainUnhealthyButRedirectsOK"
REDIRECTS_UNHEALTHY_MAIN_OK = "RedirectsUnhealthyMainOK"
MAIN_LATENCY_HIGH = "MainLatencyHigh"
MAIN_REDIRECT_LATENCY_HIGH = "MainRedirectLatencyHigh"
MAIN_SITE_LATENCY_HIGH = "MainSiteLatencyHigh"

HEALTHY_THRESHOLD = 1
MAIN_EVALUATION_PERIODS = 1
REDIRECT_EVALUATION_PERIODS = 3
MAIN_PERIOD_SECONDS = 60
REDIRECT_PERIOD_SECONDS = 300


class AlarmMetric(Enum):
    """Route 53 health check metric an alarm leaf watches."""

    STATUS = "HealthCheckStatus"
    LATENCY = "TimeToFirstByte"


class AlarmKind(Enum):
    STATUS = "status"
    LATENCY = "latency"
    COMPOSITE = "composite"


@dataclass(frozen=True)
class Leaf:
    """True while the metric alarm for ``signal`` is in ALARM."""

    signal: HealthSignal
    metric: AlarmMetric = AlarmMetric.STATUS

    @property
    def key(self) -> tuple[str, AlarmMetric]:
        return self.signal.fqdn, self.metric


@dataclass(frozen=True)
class Not:
    operand: "Expression"


@dataclass(frozen=True)
class AllOf:
    operands: tuple["Expression", ...]


@dataclass(frozen=True)
class AnyOf:
    operands: tuple["Expression", ...]


Expression = Union[Leaf, Not, AllOf, AnyOf]


def all_of(*operands: Expression) -> AllOf:
    return AllOf(tuple(operands))


def any_of(*operands: Expression) -> AnyOf:
    return AnyOf(tuple(operands))


def evaluate(expression: Expression, alarm_states: Mapping[tuple[str, AlarmMetric], bool]) -> bool:
    """
    Evaluate ``expression`` against leaf alarm states.

    ``alarm_states`` maps ``Leaf.key`` to True when that leaf is in ALARM.
    AllOf() over nothing is True and AnyOf() over nothing is False.
    """
    if isinstance(expression, Leaf):
        return alarm_states[expression.key]
    if isinstance(expression, Not):
        return not evaluate(expression.operand, alarm_states)
    if isinstance(expression, AllOf):
        return all(evaluate(operand, alarm_states) for operand in expression.operands)
    if isinstance(expression, AnyOf):
        return any(evaluate(operand, alarm_states) for operand in expression.operands)
    raise TypeError(f"not an alarm expression: {expression!r}")


def leaves(expression: Expression) -> list[Leaf]:
    """Leaves of ``expression``, left to right."""
    if isinstance(expression, Leaf):
        return [expression]
    if isinstance(expression, Not):
        return leaves(expression.operand)
    if isinstance(expression, (AllOf, AnyOf)):
        return [leaf for operand in expression.operands for leaf in leaves(operand)]
    raise TypeError(f"not an alarm expression: {expression!r}")


def render_alarm_rule(expression: Expression, alarm_name: Callable[[Leaf], str]) -> str:
    """
    Render ``expression`` in CloudWatch composite alarm rule syntax.

    Args:
        expression: Rule to render.
        alarm_name: Maps a leaf to the name of its CloudWatch metric alarm.

    Example:
        ``ALARM("www") AND (ALARM("apex") OR ALARM("redirect"))``
    """
    if isinstance(expression, Leaf):
        return f'ALARM("{alarm_name(expression)}")'
    if isinstance(expression, Not):
        return f"NOT ({render_alarm_rule(expression.operand, alarm_name)})"
    if isinstance(expression, (AllOf, AnyOf)):
        if not expression.operands:
            return "TRUE" if isinstance(expression, AllOf) else "FALSE"
        joiner = " AND " if isinstance(expression, AllOf) else " OR "
        parts = []
        for operand in expression.operands:
            rendered = render_alarm_rule(operand, alarm_name)
            if isinstance(operand, (AllOf, AnyOf)) and len(operand.operands) > 1:
                rendered = f"({rendered})"
            parts.append(rendered)
        return joiner.join(parts)
    raise TypeError(f"not an alarm expression: {expression!r}")


@dataclass(frozen=True)
class LatencyThresholds:
    """Latency alarm settings for the main domain."""

    time_to_first_byte_ms: float
    evaluation_periods: int = REDIRECT_EVALUATION_PERIODS
    period_seconds: int = MAIN_PERIOD_SECONDS


@dataclass(frozen=True)
class AlarmRule:
    """
    A named alarm.

    STATUS and LATENCY rules are single-leaf metric alarms and carry the
    threshold and evaluation settings; COMPOSITE rules combine other rules'
    leaves and carry only the expression.
    """

    name: str
    kind: AlarmKind
    expression: Expression
    description: str
    threshold: float | None = None
    evaluation_periods: int | None = None
    period_seconds: int | None = None
    actions_enabled: bool = False

    @property
    def leaf(self) -> Leaf:
        if not isinstance(self.expression, Leaf):
            raise TypeError(f"{self.name} is a composite alarm")
        return self.expression


def status_rule_name(fqdn: str) -> str:
    return f"{fqdn}-status"


def leaf_rule_name(leaf: Leaf) -> str:
    """Name of the metric AlarmRule whose expression is ``leaf``."""
    if leaf.metric is AlarmMetric.STATUS:
        return status_rule_name(leaf.signal.fqdn)
    if leaf.signal.target.is_www:
        return MAIN_LATENCY_HIGH
    return MAIN_REDIRECT_LATENCY_HIGH


def _main_signals(signals: list[HealthSignal]) -> tuple[HealthSignal, HealthSignal | None]:
    main_www = [s for s in signals if s.target.role is DomainRole.MAIN and s.target.is_www]
    main_apex = [s for s in signals if s.target.role is DomainRole.MAIN and not s.target.is_www]
    if len(main_www) != 1:
        raise MissingRequiredConfigError(
            "signals", f"expected one health signal for the main www name, got {len(main_www)}"
        )
    return main_www[0], (main_apex[0] if main_apex else None)


def _status_rule(signal: HealthSignal, is_main: bool) -> AlarmRule:
    return AlarmRule(
        name=status_rule_name(signal.fqdn),
        kind=AlarmKind.STATUS,
        expression=Leaf(signal),
        description=f"{signal.fqdn} is unhealthy",
        threshold=HEALTHY_THRESHOLD,
        evaluation_periods=MAIN_EVALUATION_PERIODS if is_main else REDIRECT_EVALUATION_PERIODS,
        period_seconds=MAIN_PERIOD_SECONDS if is_main else REDIRECT_PERIOD_SECONDS,
        actions_enabled=is_main,
    )


def _latency_rule(signal: HealthSignal, latency: LatencyThresholds) -> AlarmRule:
    leaf = Leaf(signal, AlarmMetric.LATENCY)
    return AlarmRule(
        name=leaf_rule_name(leaf),
        kind=AlarmKind.LATENCY,
        expression=leaf,
        description=(
            f"{signal.fqdn} time to first byte is above "
            f"{latency.time_to_first_byte_ms:g} ms"
        ),
        threshold=latency.time_to_first_byte_ms,
        evaluation_periods=latency.evaluation_periods,
        period_seconds=latency.period_seconds,
    )


def compose_alarms(
    signals: list[HealthSignal],
    latency: LatencyThresholds | None = None,
) -> list[AlarmRule]:
    """
    Build every alarm rule for the given health signals.

    Output order is fixed: status rules in signal order, then latency rules,
    then the composites.

    Raises:
        MissingRequiredConfigError: ``signals`` has no main www signal.
    """
    main_www, main_apex = _main_signals(signals)
    rules = [_status_rule(signal, signal is main_www) for signal in signals]

    latency_rules = []
    if latency is not None:
        latency_rules = [
            _latency_rule(signal, latency) for signal in (main_www, main_apex) if signal is not None
        ]
        rules.extend(latency_rules)

    main_down = Leaf(main_www)
    redirects_down = any_of(*(Leaf(signal) for signal in signals if signal is not main_www))
    rules.append(
        AlarmRule(
            name=MAIN_UNHEALTHY_BUT_REDIRECTS_OK,
            kind=AlarmKind.COMPOSITE,
            expression=all_of(main_down, redirects_down),
            description="Main website and one or more redirect domains are unhealthy",
            actions_enabled=True,
        )
    )
    rules.append(
        AlarmRule(
            name=REDIRECTS_UNHEALTHY_MAIN_OK,
            kind=AlarmKind.COMPOSITE,
            expression=all_of(Not(main_down), redirects_down),
            description="One or more redirect domains are unhealthy while the main website is healthy",
            actions_enabled=True,
        )
    )
    if latency_rules:
        rules.append(
            AlarmRule(
                name=MAIN_SITE_LATENCY_HIGH,
                kind=AlarmKind.COMPOSITE,
                expression=any_of(*(rule.expression for rule in latency_rules)),
                description="Main website is responding slowly",
                actions_enabled=True,
            )
        )

    known = {signal.fqdn for signal in signals}
    for rule in rules:
        for leaf in leaves(rule.expression):
            if leaf.signal.fqdn not in known:
                raise MissingRequiredConfigError(rule.name, f"unknown health signal {leaf.signal.fqdn}")
    return rules
