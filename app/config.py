"""
应用配置中心（Configuration Center）

说明：
- 所有运行配置集中在 `Settings` 中，启动时由 `Settings.from_env()` 构造一次，
  再显式传给应用工厂与服务层，调用过程中不再直接读取环境变量；
- 必填项（API Key、活动 UUID）缺失时不在启动阶段报错，而是在第一次访问上游时
  通过 `Settings.require()` 抛出 `ConfigError`，由路由转换为 500 响应。

常用环境变量：
1) 必填
   - `RAISELY_API_KEY`：Raisely API 的 Bearer Token
   - `CAMPAIGN_UUID`：活动（campaign）UUID

2) 可选
   - `PORT`：监听端口，默认 3000
   - `LOG_LEVEL`：日志等级，默认 INFO
   - `RAISELY_BASE_URL`：上游地址，默认 https://api.raisely.com/v3
   - `RAISELY_TIMEOUT`：单次 HTTP 请求超时（秒），默认 10
   - `RAISELY_MAX_PAGES`：分页抓取的安全上限，默认 20
   - `RAISELY_REQUEST_DELAY`：逐个 profile 抓取活动时的间隔（秒），默认 0
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_BASE_URL = "https://api.raisely.com/v3"


class ConfigError(Exception):
    """必填配置缺失。"""


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"Invalid integer for {name}: {raw!r}")


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"Invalid number for {name}: {raw!r}")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    campaign_uuid: Optional[str] = None
    port: int = 3000
    log_level: str = "INFO"
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 10
    max_pages: int = 20
    request_delay: float = 0.0
    profile_limit: int = 200
    activity_limit: int = 100
    probe_profiles: int = 10

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """从环境变量构造配置；空字符串视为未设置。"""
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("RAISELY_API_KEY") or None,
            campaign_uuid=env.get("CAMPAIGN_UUID") or None,
            port=_int_env(env, "PORT", 3000),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            base_url=(env.get("RAISELY_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout=_int_env(env, "RAISELY_TIMEOUT", 10),
            max_pages=max(1, _int_env(env, "RAISELY_MAX_PAGES", 20)),
            request_delay=max(0.0, _float_env(env, "RAISELY_REQUEST_DELAY", 0.0)),
        )

    @property
    def have_key(self) -> bool:
        return bool(self.api_key)

    @property
    def have_campaign(self) -> bool:
        return bool(self.campaign_uuid)

    def require(self) -> None:
        """校验必填项，缺失时抛出 ConfigError。"""
        if not self.api_key:
            raise ConfigError("Missing RAISELY_API_KEY")
        if not self.campaign_uuid:
            raise ConfigError("Missing CAMPAIGN_UUID")
