"""
Commutes API routes

包含：
- GET /commutes：通勤排行榜（个人/团队/组织）
- GET /probe：诊断，显示命中的 profiles 选择器与抽样活动数
- GET /peek：诊断，显示各上游接口的状态码
"""

from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from ..config import ConfigError
from ..schemas.commutes import LeaderboardResponse, PeekResponse, ProbeResponse
from ..services.commute_service import CommuteService
from ..services.resolver import UpstreamResolutionError
from ..utils import get_commute_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["通勤"])


def _error_detail(e: Exception) -> dict:
    return {"ok": False, "error": str(e)}


@router.get("/commutes", response_model=LeaderboardResponse)
def get_commutes(
    metric: str = Query("points", pattern="^(points|distance)$", description="排序指标：points 或 distance"),
    service: CommuteService = Depends(get_commute_service),
):
    """通勤排行榜

    Raises:
        HTTPException: 500 - 配置缺失 / 全部上游候选失败 / 其他内部错误
    """
    try:
        return service.leaderboard(metric)
    except ConfigError as e:
        logger.error("[commute-api][config] %s", e)
        raise HTTPException(status_code=500, detail=_error_detail(e))
    except UpstreamResolutionError as e:
        logger.error("[commute-api][upstream] attempts=%s last_status=%s", len(e.attempts), e.last_status)
        raise HTTPException(status_code=500, detail=e.to_dict())
    except Exception as e:
        logger.exception("[commute-api][error] /commutes")
        raise HTTPException(status_code=500, detail=_error_detail(e))


@router.get("/probe", response_model=ProbeResponse)
def probe(service: CommuteService = Depends(get_commute_service)):
    try:
        return service.probe()
    except ConfigError as e:
        logger.error("[probe-api][config] %s", e)
        raise HTTPException(status_code=500, detail=_error_detail(e))
    except Exception as e:
        logger.exception("[probe-api][error]")
        raise HTTPException(status_code=500, detail=_error_detail(e))


@router.get("/peek", response_model=PeekResponse)
def peek(service: CommuteService = Depends(get_commute_service)):
    try:
        return service.peek()
    except ConfigError as e:
        logger.error("[peek-api][config] %s", e)
        raise HTTPException(status_code=500, detail=_error_detail(e))
    except Exception as e:
        logger.exception("[peek-api][error]")
        raise HTTPException(status_code=500, detail=_error_detail(e))
