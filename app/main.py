"""
Raisely 通勤排行榜代理主应用文件。

本文件是FastAPI应用的入口点，负责：
1. 通过 create_app(settings) 创建FastAPI应用实例
2. 配置跨域（CORS）与日志
3. 注册各个模块的路由

启动：uvicorn app.main:app，或 python -m app.main（读取 PORT，默认 3000）
"""

from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .logging_config import setup_logging
from .config import Settings

from .api.commutes import router as commutes_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(title="Raisely 通勤排行榜代理")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # 路由注册
    app.include_router(commutes_router, tags=["通勤"])

    @app.get("/", response_class=PlainTextResponse, tags=["健康检查"])
    def liveness():
        return "Raisely commute proxy is running"

    if not (settings.have_key and settings.have_campaign):
        logger.warning(
            "[startup] missing config haveKey=%s haveCampaign=%s",
            settings.have_key, settings.have_campaign,
        )
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = app.state.settings
    logger.info("Proxy running on :%s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
