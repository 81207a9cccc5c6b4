"""Raisely API 客户端（最小封装）

功能：
- 统一添加 Bearer 鉴权头（缺少配置时抛出 ConfigError）；
- 统一拼接绝对 URL，便于诊断接口原样回显已尝试的地址；
- GET 调用不因非 200 抛错，而是返回状态码与响应体，由上层决定是否换下一个候选；
- 响应体解析 JSON 失败时视为无响应体（None），不向上抛出；
- 连接失败或超时不向上抛出，记为状态码 0。
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode
import logging
import requests

from ..config import Settings


logger = logging.getLogger(__name__)

# 请求未得到任何 HTTP 响应（连接失败、超时）时记录的状态码
TRANSPORT_ERROR_STATUS = 0


@dataclass
class Attempt:
    """一次上游请求的诊断记录。"""
    label: str
    url: str
    status: int

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "url": self.url, "status": self.status}


@dataclass
class UpstreamResponse:
    url: str
    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.status == 200

    def attempt(self, label: str) -> Attempt:
        return Attempt(label=label, url=self.url, status=self.status)

    @property
    def data(self) -> Any:
        """响应体中的 `data` 字段；响应体不是对象时返回 None。"""
        if isinstance(self.body, dict):
            return self.body.get("data")
        return None

    @property
    def next_url(self) -> Optional[str]:
        if not isinstance(self.body, dict):
            return None
        pagination = self.body.get("pagination") or {}
        if not isinstance(pagination, dict):
            return None
        return pagination.get("nextUrl") or None


class RaiselyClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.timeout = settings.timeout
        self.session = session or requests.Session()
        self.last_response: Optional[UpstreamResponse] = None

    def _headers(self) -> Dict[str, str]:
        self.settings.require()
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Accept": "application/json",
        }

    def build_url(self, path: str, **params: Any) -> str:
        """拼接绝对 URL；值为 None 的参数会被忽略，保留参数顺序。"""
        if path.startswith("http://") or path.startswith("https://"):
            url = path
        else:
            url = f"{self.base_url}/{path.lstrip('/')}"
        query = {k: v for k, v in params.items() if v is not None}
        if query:
            url = f"{url}?{urlencode(query, quote_via=quote)}"
        return url

    @staticmethod
    def segment(value: str) -> str:
        """对路径片段做 URL 编码（不保留 `/`）。"""
        return quote(str(value), safe="")

    def get_json(self, url: str) -> UpstreamResponse:
        """GET 并尝试解析 JSON；解析失败时 body 为 None。

        连接失败或超时记为状态码 0（TRANSPORT_ERROR_STATUS），由上层换下一个候选。
        """
        headers = self._headers()
        try:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("[raisely-client][transport-error] url=%s err=%s", url, e)
            self.last_response = UpstreamResponse(url=url, status=TRANSPORT_ERROR_STATUS, body=None)
            return self.last_response
        try:
            body = resp.json()
        except ValueError:
            body = None
        logger.debug("[raisely-client][get] url=%s status=%s", url, resp.status_code)
        self.last_response = UpstreamResponse(url=url, status=resp.status_code, body=body)
        return self.last_response

    def campaign_url(self) -> str:
        self.settings.require()
        return self.build_url(f"campaigns/{self.segment(self.settings.campaign_uuid)}")

    def get_campaign(self) -> UpstreamResponse:
        """获取活动（campaign）元信息，其中包含 site.slug。"""
        return self.get_json(self.campaign_url())

    def get_campaign_profile(self) -> UpstreamResponse:
        self.settings.require()
        return self.get_json(
            self.build_url(f"campaign-profiles/{self.segment(self.settings.campaign_uuid)}")
        )

    def profile_activities_url(self, profile_uuid: str) -> str:
        return self.build_url(
            f"profiles/{self.segment(profile_uuid)}/activities",
            order="desc",
            sort="createdAt",
            limit=self.settings.activity_limit,
        )
