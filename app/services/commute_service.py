"""Commute Service（通勤排行榜编排层）

职责：
- 解析上游活动集合（见 resolver），经通勤分类后聚合为个人/团队/组织三张榜单；
- 提供 /probe、/peek 诊断所需的数据，原样暴露已尝试的上游地址与状态码。

服务实例按请求构造，不持有跨请求的状态。
"""

from typing import Any, Dict, List, Optional, Sequence
import logging
import time

from ..clients.raisely_client import Attempt, RaiselyClient
from ..config import Settings
from ..core.commute import CommutePolicy, DEFAULT_POLICY
from ..core.leaderboard import aggregate
from ..schemas.commutes import (
    LeaderboardResponse,
    PeekResponse,
    ProbeResponse,
)
from .profile_directory import discover_profiles, profile_uuid, site_slug_of
from .resolver import Strategy, UpstreamResolver, default_activity_strategies


logger = logging.getLogger(__name__)


class CommuteService:
    def __init__(
        self,
        settings: Settings,
        client: Optional[RaiselyClient] = None,
        policy: CommutePolicy = DEFAULT_POLICY,
        strategies: Optional[Sequence[Strategy]] = None,
    ):
        self.settings = settings
        self.client = client or RaiselyClient(settings)
        self.policy = policy
        self._strategies = strategies

    def strategies(self) -> Sequence[Strategy]:
        if self._strategies is not None:
            return self._strategies
        self.settings.require()
        return default_activity_strategies(self.settings.campaign_uuid)

    def fetch_activities(self) -> List[Dict[str, Any]]:
        resolution = UpstreamResolver(self.client).resolve(self.strategies())
        return resolution.data

    def leaderboard(self, metric: str = "points") -> LeaderboardResponse:
        activities = self.fetch_activities()
        boards = aggregate(activities, self.policy, metric)
        logger.info(
            "[commutes][built] activities=%s individuals=%s teams=%s organisations=%s",
            len(activities), len(boards.individuals), len(boards.teams), len(boards.organisations),
        )
        return LeaderboardResponse(**boards.to_dict())

    def probe(self) -> ProbeResponse:
        """发现 profiles，并对前若干个 profile 统计活动数量（避免大量请求上游）。"""
        attempts: List[Attempt] = []
        listing = discover_profiles(self.client, attempts)

        total = 0
        for i, profile in enumerate(listing.profiles[: self.settings.probe_profiles]):
            pid = profile_uuid(profile)
            if not pid:
                continue
            if i and self.settings.request_delay:
                time.sleep(self.settings.request_delay)
            resp = self.client.get_json(self.client.profile_activities_url(pid))
            attempts.append(resp.attempt("profiles/{uuid}/activities"))
            if resp.ok and isinstance(resp.data, list):
                total += len(resp.data)

        return ProbeResponse(
            ok=True,
            path="profiles" if "profiles" in listing.path else "unknown",
            usedEndpoint=listing.path,
            status=listing.status,
            profilesCount=len(listing.profiles),
            total=total,
            sample=listing.profiles[:2],
            attempts=[a.to_dict() for a in attempts],
        )

    def peek(self) -> PeekResponse:
        campaign = self.client.get_campaign()
        campaign_profile = self.client.get_campaign_profile()
        listing = discover_profiles(self.client)

        return PeekResponse(
            env={"haveKey": self.settings.have_key, "haveCampaign": self.settings.have_campaign},
            check={
                "GET /campaigns/{uuid}": campaign.status,
                "GET /campaign-profiles/{uuid}": campaign_profile.status,
                f"GET {listing.path}": listing.status,
            },
            siteSlug=site_slug_of(campaign),
            profilesCount=len(listing.profiles),
            triedProfilesUrls=listing.tried,
        )
