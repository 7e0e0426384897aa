"""
blog-backend 도메인 모델 정의

구독자 상태는 Beehiiv에만 존재하며 로컬에 저장하지 않는다.
아래 타입은 요청 단위로 생성되는 값 객체다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class SubscriptionSource(str, Enum):
    """구독 유입 경로 (utm_source로 전달)"""
    LANDING_PAGE = "landing_page"
    LEAD_MAGNET = "lead_magnet"
    NEWSLETTER = "newsletter"


class SubscriptionTag(str, Enum):
    """구독자 태그"""
    NEW_SUBSCRIBER = "new"


@dataclass(frozen=True)
class Subscriber:
    """Beehiiv 구독자"""
    id: str
    email: str
    tags: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["Subscriber"]:
        """API 응답의 data 객체 파싱. id가 없으면 None"""
        if not isinstance(payload, dict):
            return None
        subscriber_id = payload.get("id")
        if not subscriber_id or not isinstance(subscriber_id, str):
            return None
        raw_tags = payload.get("tags") or []
        names = (
            tag.get("name") if isinstance(tag, dict) else tag
            for tag in (raw_tags if isinstance(raw_tags, list) else [])
        )
        tags = frozenset(name for name in names if isinstance(name, str) and name)
        return cls(
            id=subscriber_id,
            email=payload.get("email") or "",
            tags=tags,
        )


@dataclass
class SubscriptionResult:
    """구독 처리 결과"""
    success: bool
    message: str
    subscriber_id: Optional[str] = None
    already_subscribed: Optional[bool] = None

    def to_response(self) -> Dict[str, Any]:
        """구독 API 응답 본문"""
        return {
            "message": self.message,
            "alreadySubscribed": self.already_subscribed,
        }


@dataclass
class ResourceDeliveryRequest:
    """리소스 이메일 발송 요청"""
    email: str
    resource_id: str
    resource_title: str
    resource_link: str
    delay_minutes: Optional[int] = None
