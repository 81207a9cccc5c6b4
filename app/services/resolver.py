"""上游集合解析（Upstream Resolver）

上游活动集合的 URL 形态在不同版本间不稳定，因此按顺序尝试一组策略：
- CollectionStrategy：单一 URL 形态（路径式或查询参数式），按 pagination.nextUrl 翻页；
- ProfileEnumerationStrategy：先发现 profiles，再逐个拉取 profile 的活动。

第一个成功的策略返回数据；每一次上游请求都记录为 Attempt，
全部失败时抛出 UpstreamResolutionError，携带全部尝试记录、最后的状态码与响应体。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import logging
import time

from ..clients.raisely_client import Attempt, RaiselyClient
from .profile_directory import discover_profiles, profile_uuid


logger = logging.getLogger(__name__)


class UpstreamResolutionError(Exception):
    def __init__(
        self,
        attempts: List[Attempt],
        last_status: Optional[int] = None,
        last_body: Any = None,
    ):
        urls = ", ".join(a.url for a in attempts) or "none"
        super().__init__(f"All upstream candidates failed (last status {last_status}); tried: {urls}")
        self.attempts = attempts
        self.last_status = last_status
        self.last_body = last_body

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "error": str(self),
            "attempts": [a.to_dict() for a in self.attempts],
            "last_status": self.last_status,
            "last_body": self.last_body,
        }


@dataclass
class Resolution:
    data: List[Dict[str, Any]]
    label: str
    attempts: List[Attempt] = field(default_factory=list)


class Strategy:
    """解析策略基类：fetch 返回 None 表示失败，交给下一个策略。"""

    label = "strategy"

    def fetch(self, client: RaiselyClient, attempts: List[Attempt]) -> Optional[List[Dict[str, Any]]]:
        raise NotImplementedError


class CollectionStrategy(Strategy):
    def __init__(self, label: str, path: str, **params: Any):
        self.label = label
        self.path = path
        self.params = params

    def fetch(self, client, attempts):
        url = client.build_url(self.path, **self.params)
        items: List[Dict[str, Any]] = []
        pages = 0
        while url:
            resp = client.get_json(url)
            attempts.append(resp.attempt(self.label))
            pages += 1
            if not resp.ok or not isinstance(resp.data, list):
                if pages == 1:
                    return None
                # 后续页失败时保留已取得的数据
                logger.warning("[resolver][page-failed] label=%s page=%s status=%s", self.label, pages, resp.status)
                break
            items.extend(resp.data)
            url = resp.next_url
            if url and pages >= client.settings.max_pages:
                logger.warning("[resolver][page-cap] label=%s pages=%s", self.label, pages)
                break
            if url:
                url = client.build_url(url)
        return items


class ProfileEnumerationStrategy(Strategy):
    label = "profiles/{uuid}/activities"

    def fetch(self, client, attempts):
        listing = discover_profiles(client, attempts)
        if not listing.profiles:
            return None

        delay = client.settings.request_delay
        items: List[Dict[str, Any]] = []
        first = True
        for profile in listing.profiles:
            pid = profile_uuid(profile)
            if not pid:
                continue
            if delay and not first:
                time.sleep(delay)
            first = False
            resp = client.get_json(client.profile_activities_url(pid))
            attempts.append(resp.attempt(self.label))
            if not resp.ok or not isinstance(resp.data, list):
                continue
            for activity in resp.data:
                if isinstance(activity, dict) and not activity.get("profile"):
                    activity = dict(activity, profile=profile)
                items.append(activity)
        return items


def default_activity_strategies(campaign_uuid: str) -> List[Strategy]:
    """活动集合的默认候选顺序：路径式 → 查询参数式 → 逐 profile 枚举。"""
    segment = RaiselyClient.segment(campaign_uuid)
    return [
        CollectionStrategy("campaigns/{uuid}/activities", f"campaigns/{segment}/activities"),
        CollectionStrategy("activities?campaign", "activities", campaign=campaign_uuid),
        CollectionStrategy("activities?campaignUuid", "activities", campaignUuid=campaign_uuid),
        ProfileEnumerationStrategy(),
    ]


class UpstreamResolver:
    def __init__(self, client: RaiselyClient):
        self.client = client

    def resolve(self, strategies: Sequence[Strategy]) -> Resolution:
        """按顺序尝试策略，返回第一个成功的结果。

        Raises:
            UpstreamResolutionError: 全部策略失败
        """
        attempts: List[Attempt] = []
        for strategy in strategies:
            before = len(attempts)
            data = strategy.fetch(self.client, attempts)
            if data is not None:
                logger.info(
                    "[resolver][hit] label=%s items=%s attempts=%s",
                    strategy.label, len(data), len(attempts),
                )
                return Resolution(data=data, label=strategy.label, attempts=attempts)
            logger.info("[resolver][miss] label=%s requests=%s", strategy.label, len(attempts) - before)

        last = self.client.last_response
        raise UpstreamResolutionError(
            attempts,
            last.status if last is not None else None,
            last.body if last is not None else None,
        )
