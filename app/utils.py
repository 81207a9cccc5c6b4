"""
FastAPI 依赖注入工具函数。

主要功能：
1. 从应用状态中取出启动时构造的 Settings
2. 按请求构造 CommuteService（每个请求一个独立的上游会话）
"""

from fastapi import Depends, Request

from .clients.raisely_client import RaiselyClient
from .config import Settings
from .services.commute_service import CommuteService


def get_settings(request: Request) -> Settings:
    """FastAPI 依赖项：获取应用配置。"""
    return request.app.state.settings


def get_commute_service(settings: Settings = Depends(get_settings)):
    """FastAPI 依赖项：获取 CommuteService，请求结束后关闭上游会话。"""
    client = RaiselyClient(settings)
    try:
        yield CommuteService(settings, client)
    finally:
        client.session.close()
