from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Sequence


COMMUTE_ACTIVITY_TYPES = frozenset([
    "Run", "Walk", "Ride", "E-Bike Ride", "Scooter",
    "Commute", "Transit", "Bus", "Ferry",
])
COMMUTE_FLAGS = ("commute", "is_commute", "isCommute")


def source_of(activity: Dict[str, Any]) -> str:
    return str(activity.get("source") or "").strip().lower()


def type_of(activity: Dict[str, Any]) -> str:
    return str(activity.get("type") or activity.get("sport") or "").strip()


def meta_of(activity: Dict[str, Any]) -> Dict[str, Any]:
    meta = activity.get("meta") or activity.get("metadata") or {}
    return meta if isinstance(meta, dict) else {}


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return value in ("true", "1")


def is_flagged(activity: Dict[str, Any], flags: Iterable[str] = COMMUTE_FLAGS) -> bool:
    meta = meta_of(activity)
    return any(_truthy(meta.get(k)) for k in flags)


@dataclass(frozen=True)
class Rule:
    """分类规则：predicate 命中时由 include 决定是否计为通勤。"""
    name: str
    predicate: Callable[[Dict[str, Any]], bool]
    include: bool


class CommutePolicy:
    """有序规则表，第一条命中的规则决定结果；无规则命中时返回 default。"""

    def __init__(self, rules: Sequence[Rule], default: bool = False):
        self.rules = tuple(rules)
        self.default = default

    def match(self, activity: Dict[str, Any]) -> Optional[Rule]:
        if not isinstance(activity, dict):
            return None
        for rule in self.rules:
            if rule.predicate(activity):
                return rule
        return None

    def is_commute(self, activity: Dict[str, Any]) -> bool:
        rule = self.match(activity)
        return self.default if rule is None else rule.include

    __call__ = is_commute


def build_policy(
    commute_types: Iterable[str] = COMMUTE_ACTIVITY_TYPES,
    external_sources: Iterable[str] = ("strava",),
) -> CommutePolicy:
    types = frozenset(commute_types)
    external = frozenset(s.lower() for s in external_sources)

    def manual(a):
        return source_of(a) == "manual"

    def external_source(a):
        return source_of(a) in external

    return CommutePolicy([
        Rule("manual-untyped", lambda a: manual(a) and not type_of(a), True),
        Rule("manual-commute-type", lambda a: manual(a) and type_of(a) in types, True),
        Rule("manual-other-type", manual, False),
        Rule("external-flagged", lambda a: external_source(a) and is_flagged(a), True),
        Rule("external-commute-type", lambda a: external_source(a) and type_of(a) in types, True),
    ], default=False)


DEFAULT_POLICY = build_policy()


def is_likely_commute(activity: Dict[str, Any]) -> bool:
    return DEFAULT_POLICY.is_commute(activity)
