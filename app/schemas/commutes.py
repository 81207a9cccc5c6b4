"""
Commutes 模块的响应模式

定义排行榜与诊断接口的输出数据结构。
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    """排行榜中的一行"""
    uuid: str = Field(..., description="个人/团队/组织 UUID")
    name: str = Field(..., description="显示名称")
    avatar: Optional[str] = Field(None, description="头像缩略图地址（仅个人榜）")
    points: int = Field(0, description="通勤次数")
    distance: float = Field(0.0, description="通勤距离累计（上游单位）")


class LeaderboardResponse(BaseModel):
    """通勤排行榜"""
    individuals: List[LeaderboardEntry] = Field(default_factory=list, description="个人榜")
    teams: List[LeaderboardEntry] = Field(default_factory=list, description="团队榜")
    organisations: List[LeaderboardEntry] = Field(default_factory=list, description="组织榜")


class AttemptRecord(BaseModel):
    label: str
    url: str
    status: int


class ProbeResponse(BaseModel):
    """/probe 诊断结果"""
    ok: bool = True
    path: str = Field(..., description="命中的上游类别：profiles 或 unknown")
    usedEndpoint: str = Field(..., description="命中的 profiles 选择器")
    status: Optional[int] = Field(None, description="命中选择器的 HTTP 状态码")
    profilesCount: int = Field(0, description="发现的 profile 数量")
    total: int = Field(0, description="抽样 profile 的活动总数")
    sample: List[Dict[str, Any]] = Field(default_factory=list, description="前两个 profile 原样返回")
    attempts: List[AttemptRecord] = Field(default_factory=list, description="全部上游请求记录")


class EnvFlags(BaseModel):
    haveKey: bool
    haveCampaign: bool


class PeekResponse(BaseModel):
    """/peek 诊断结果"""
    env: EnvFlags
    check: Dict[str, Optional[int]] = Field(..., description="各上游接口的 HTTP 状态码")
    siteSlug: Optional[str] = None
    profilesCount: int = 0
    triedProfilesUrls: List[str] = Field(default_factory=list)
