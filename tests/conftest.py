"""
공통 테스트 픽스처
"""

import sys
from pathlib import Path
from typing import Dict, List, Set

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from blog_backend.config import Settings
from blog_backend.common.models import Subscriber
from blog_backend.common.registry.beehiiv_client import CreateResult, LookupResult


class FakeRegistry:
    """메모리 기반 Beehiiv 대역 - 호출 횟수를 기록한다"""

    def __init__(self):
        self.subscribers: Dict[str, Subscriber] = {}
        self.tags: Dict[str, Set[str]] = {}
        self.calls: Dict[str, List] = {"lookup": [], "create": [], "add_tag": [], "remove": []}
        self.fail_tags: Set[str] = set()
        self.fail_create = False

    def _by_email(self, email):
        for subscriber in self.subscribers.values():
            if subscriber.email == email:
                return subscriber
        return None

    async def lookup_by_email(self, email):
        self.calls["lookup"].append(email)
        subscriber = self._by_email(email)
        return LookupResult(found=subscriber is not None, subscriber=subscriber)

    async def create(self, email, source):
        self.calls["create"].append((email, source))
        if self.fail_create:
            return CreateResult(created=False)
        subscriber = Subscriber(id=f"sub_{len(self.subscribers) + 1}", email=email)
        self.subscribers[subscriber.id] = subscriber
        self.tags[subscriber.id] = set()
        return CreateResult(created=True, subscriber=subscriber)

    async def add_tag(self, subscriber_id, tag):
        self.calls["add_tag"].append((subscriber_id, tag))
        if not tag or tag in self.fail_tags:
            return False
        self.tags[subscriber_id].add(tag)
        return True

    async def remove(self, subscriber_id):
        self.calls["remove"].append(subscriber_id)
        if subscriber_id not in self.subscribers:
            return False
        del self.subscribers[subscriber_id]
        del self.tags[subscriber_id]
        return True


@pytest.fixture
def test_settings() -> Settings:
    """외부 연동이 모두 설정된 Settings"""
    return Settings(
        beehiiv_api_key="test-key",
        beehiiv_pub_id="pub_test",
        beehiiv_api_url="https://api.beehiiv.test/v2",
        email_host="smtp.test.local",
        email_port=587,
        email_user="sender@test.local",
        email_pass="secret",
        resource_email_delay_minutes=1,
    )


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()
