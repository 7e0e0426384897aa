"""구독 관리 패키지"""

from .manager import SubscriptionManager

__all__ = ["SubscriptionManager"]
