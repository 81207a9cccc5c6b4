"""Profile 发现（Profile Directory）

上游 profiles 列表接口在不同活动配置下接受的筛选参数不一致，这里按顺序尝试：
1. profiles?campaign={uuid}
2. profiles?campaignProfile={uuid}
3. profiles?site={slug}（slug 来自活动元信息 site.slug，缺失则跳过）
4. profiles?campaign={uuid}&status=active

第一个返回 200 且 data 非空的选择器胜出；全部失败时返回空列表而不是抛错。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from ..clients.raisely_client import Attempt, RaiselyClient, UpstreamResponse


logger = logging.getLogger(__name__)


@dataclass
class ProfileListing:
    profiles: List[Dict[str, Any]]
    path: str
    status: Optional[int]
    tried: List[str] = field(default_factory=list)
    site_slug: Optional[str] = None


def profile_uuid(profile: Dict[str, Any]) -> Optional[str]:
    if not isinstance(profile, dict):
        return None
    return profile.get("uuid") or profile.get("profileUuid")


def _non_empty_list(resp: UpstreamResponse) -> bool:
    return resp.ok and isinstance(resp.data, list) and len(resp.data) > 0


def site_slug_of(campaign: UpstreamResponse) -> Optional[str]:
    data = campaign.data if isinstance(campaign.data, dict) else {}
    site = data.get("site") or {}
    if not isinstance(site, dict):
        return None
    return site.get("slug") or None


def discover_profiles(
    client: RaiselyClient,
    attempts: Optional[List[Attempt]] = None,
) -> ProfileListing:
    """按选择器顺序发现 profiles。

    参数：
        client: Raisely 客户端
        attempts: 可选的诊断列表，每次上游请求都会追加一条 Attempt

    返回：
        ProfileListing；全部选择器失败时 profiles 为空，path 为 "profiles (empty)"。
    """
    settings = client.settings
    settings.require()
    campaign = settings.campaign_uuid
    limit = settings.profile_limit
    attempts = attempts if attempts is not None else []
    tried: List[str] = []
    last: Optional[UpstreamResponse] = None

    def try_selector(label: str, url: str) -> Optional[ProfileListing]:
        nonlocal last
        tried.append(url)
        resp = client.get_json(url)
        attempts.append(resp.attempt(label))
        last = resp
        if _non_empty_list(resp):
            logger.info("[profiles][hit] path=%s count=%s", label, len(resp.data))
            return ProfileListing(profiles=resp.data, path=label, status=resp.status, tried=tried)
        logger.info("[profiles][miss] path=%s status=%s", label, resp.status)
        return None

    found = try_selector(
        "profiles?campaign",
        client.build_url("profiles", campaign=campaign, limit=limit),
    )
    if found:
        return found

    found = try_selector(
        "profiles?campaignProfile",
        client.build_url("profiles", campaignProfile=campaign, limit=limit),
    )
    if found:
        return found

    meta = client.get_campaign()
    attempts.append(meta.attempt("campaigns/{uuid}"))
    slug = site_slug_of(meta)
    if slug:
        found = try_selector(
            f"profiles?site={slug}",
            client.build_url("profiles", site=slug, limit=limit),
        )
        if found:
            found.site_slug = slug
            return found

    found = try_selector(
        "profiles?campaign&status=active",
        client.build_url("profiles", campaign=campaign, status="active", limit=limit),
    )
    if found:
        found.site_slug = slug
        return found

    data = last.data if last is not None else None
    logger.warning("[profiles][empty] tried=%s", len(tried))
    return ProfileListing(
        profiles=data if isinstance(data, list) else [],
        path="profiles (empty)",
        status=last.status if last is not None else None,
        tried=tried,
        site_slug=slug,
    )
