"""
pytest配置文件，定义测试环境和共享的测试夹具（fixtures）。

主要功能：
1. 提供测试配置（Settings），不读取真实环境变量
2. 提供内存中的假上游会话（FakeSession），按 URL 返回预设的状态码与响应体
3. 提供FastAPI测试客户端，依赖覆盖为使用假上游的 CommuteService

测试过程中不会访问网络。
"""

import pytest
from fastapi.testclient import TestClient

from app.clients.raisely_client import RaiselyClient
from app.config import Settings
from app.main import create_app
from app.services.commute_service import CommuteService
from app.utils import get_commute_service


BASE = "https://api.raisely.test/v3"
CAMPAIGN = "camp-1"


class FakeResponse:
    def __init__(self, status_code, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ""

    def json(self):
        if self._body is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeSession:
    """按 URL 返回预设响应；同一 URL 注册多次时按顺序依次返回。未注册的 URL 返回 404。"""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.closed = False

    def add(self, url, status=200, body=None, text=None):
        self.routes.setdefault(url, []).append(FakeResponse(status, body, text))
        return self

    def fail(self, url, error):
        """注册一个抛出异常的 URL（模拟连接失败、超时）"""
        self.routes.setdefault(url, []).append(error)
        return self

    def get(self, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "headers": headers or {}, "timeout": timeout})
        queue = self.routes.get(url)
        if not queue:
            return FakeResponse(404, {"errors": [{"message": "Not found"}]})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


@pytest.fixture
def settings():
    """提供完整的测试配置"""
    return Settings(api_key="test-key", campaign_uuid=CAMPAIGN, base_url=BASE)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def raisely(settings, fake_session):
    """提供使用假上游会话的 Raisely 客户端"""
    return RaiselyClient(settings, session=fake_session)


@pytest.fixture
def make_client():
    """根据给定配置与假会话构造 FastAPI 测试客户端"""
    opened = []

    def _make(settings, session):
        app = create_app(settings)
        app.dependency_overrides[get_commute_service] = lambda: CommuteService(
            settings, RaiselyClient(settings, session=session)
        )
        test_client = TestClient(app)
        opened.append((app, test_client))
        return test_client

    yield _make
    for app, test_client in opened:
        test_client.close()
        app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, settings, fake_session):
    """提供FastAPI测试客户端（假上游）"""
    return make_client(settings, fake_session)


@pytest.fixture
def sample_activities():
    """提供测试用的活动数据样本"""
    alice = {"uuid": "p-alice", "fullName": "Alice", "avatar": {"thumb": "https://img/alice.png"}}
    bob = {"uuid": "p-bob", "name": "Bob"}
    team = {"uuid": "t-1", "name": "Cyclists"}
    org = {"uuid": "o-1", "name": "Acme"}
    return [
        {"source": "manual", "type": "Ride", "distance": 5.5, "profile": alice, "team": team, "organisation": org},
        {"source": "manual", "profile": alice, "team": team},
        {"source": "strava", "type": "Yoga", "meta": {}, "profile": bob, "team": team},
        {"source": "strava", "type": "Workout", "meta": {"isCommute": "true"}, "distance": 3, "profile": bob},
        {"source": "strava", "type": "Walk", "profile": bob, "organisation": org},
        {"source": "manual", "type": "Swim", "profile": bob},
        {"source": "garmin", "type": "Ride", "profile": alice},
    ]
