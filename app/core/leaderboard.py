import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .commute import DEFAULT_POLICY


METRICS = ("points", "distance")


@dataclass
class Row:
    uuid: str
    name: str
    avatar: Optional[str] = None
    points: int = 0
    distance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "name": self.name,
            "avatar": self.avatar,
            "points": self.points,
            "distance": self.distance,
        }


@dataclass
class Leaderboards:
    individuals: List[Row] = field(default_factory=list)
    teams: List[Row] = field(default_factory=list)
    organisations: List[Row] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "individuals": [r.to_dict() for r in self.individuals],
            "teams": [r.to_dict() for r in self.teams],
            "organisations": [r.to_dict() for r in self.organisations],
        }


def _obj(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def distance_of(activity: Dict[str, Any]) -> float:
    value = activity.get("distance")
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return 0.0
    try:
        result = float(value)
    except (ValueError, OverflowError):
        return 0.0
    # nan / inf 会破坏按距离排序
    return result if math.isfinite(result) else 0.0


def _avatar(profile: Dict[str, Any]) -> Optional[str]:
    return _obj(profile.get("avatar")).get("thumb")


# (榜单, 活动字段, 备用 id 字段, 名称字段, 默认名称, 是否取头像)
BUCKETS: Tuple[Tuple[str, str, str, Tuple[str, ...], str, bool], ...] = (
    ("individuals", "profile", "profileUuid", ("fullName", "name"), "Anonymous", True),
    ("teams", "team", "teamUuid", ("name",), "Team", False),
    ("organisations", "organisation", "organisationUuid", ("name",), "Organisation", False),
)


def sort_rows(rows: Iterable[Row], metric: str = "points") -> List[Row]:
    if metric not in METRICS:
        raise ValueError(f"unknown metric: {metric}")
    # sorted 是稳定排序，同分保持首次出现的顺序
    return sorted(rows, key=lambda r: getattr(r, metric), reverse=True)


def aggregate(
    activities: Iterable[Dict[str, Any]],
    policy: Callable[[Dict[str, Any]], bool] = DEFAULT_POLICY,
    metric: str = "points",
) -> Leaderboards:
    if metric not in METRICS:
        raise ValueError(f"unknown metric: {metric}")
    acc: Dict[str, Dict[str, Row]] = {name: {} for name, *_ in BUCKETS}
    for a in activities:
        if not isinstance(a, dict) or not policy(a):
            continue
        dist = distance_of(a)
        for bucket, key, alt_id, name_keys, default_name, with_avatar in BUCKETS:
            ref = _obj(a.get(key))
            rid = ref.get("uuid") or ref.get(alt_id)
            if not rid:
                continue
            row = acc[bucket].get(rid)
            if row is None:
                row = Row(
                    uuid=rid,
                    name=next((ref[k] for k in name_keys if ref.get(k)), default_name),
                    avatar=_avatar(ref) if with_avatar else None,
                )
                acc[bucket][rid] = row
            row.points += 1
            row.distance += dist
    return Leaderboards(
        individuals=sort_rows(acc["individuals"].values(), metric),
        teams=sort_rows(acc["teams"].values(), metric),
        organisations=sort_rows(acc["organisations"].values(), metric),
    )
