"""
구독 관리 매니저
Beehiiv 조회 → 생성 → 태그 적용 플로우
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from ..messages import ERROR_MESSAGES, SUCCESS_MESSAGES
from ..models import SubscriptionResult, SubscriptionSource
from ..registry.beehiiv_client import BeehiivClient
from ..utils import get_tags_for_new_subscriber

logger = logging.getLogger(__name__)


class SubscriptionManager:
    """구독 관리 매니저

    같은 이메일로 여러 번 호출해도 레지스트리에는 하나의 구독자만 남고,
    태그는 지금까지 요청된 태그의 합집합이 된다.
    """

    def __init__(self, client: BeehiivClient):
        self.client = client

    async def _apply_tags(self, subscriber_id: str, tags: Iterable[str]) -> bool:
        """태그 병렬 적용. 하나라도 실패하면 False"""
        tags = list(tags)
        if not tags:
            return True
        results = await asyncio.gather(
            *(self.client.add_tag(subscriber_id, tag) for tag in tags)
        )
        return all(results)

    async def process_subscription(
        self,
        email: str,
        tags: Optional[List[str]] = None,
        source: SubscriptionSource = SubscriptionSource.LANDING_PAGE,
    ) -> SubscriptionResult:
        """구독 처리 (조회 → 생성 또는 태그 업데이트)"""
        tags = list(tags or [])
        try:
            logger.info(f"구독 처리 시작: {email} (source={SubscriptionSource(source).value}, tags={tags})")

            lookup = await self.client.lookup_by_email(email)

            if lookup.found and lookup.subscriber:
                subscriber_id = lookup.subscriber.id
                if not await self._apply_tags(subscriber_id, tags):
                    logger.error(f"기존 구독자 태그 업데이트 실패: {email} (id={subscriber_id})")
                    return SubscriptionResult(
                        success=False,
                        message=ERROR_MESSAGES["tags_update_error"],
                    )

                logger.info(f"기존 구독자 업데이트: {email} (id={subscriber_id})")
                return SubscriptionResult(
                    success=True,
                    message=SUCCESS_MESSAGES["subscription_updated"],
                    subscriber_id=subscriber_id,
                    already_subscribed=True,
                )

            created = await self.client.create(email, source)
            if not created.created or not created.subscriber:
                logger.error(f"구독자 생성 실패: {email}")
                return SubscriptionResult(
                    success=False,
                    message=ERROR_MESSAGES["subscription_error"],
                )

            subscriber_id = created.subscriber.id
            if not await self._apply_tags(subscriber_id, get_tags_for_new_subscriber(tags)):
                logger.error(f"신규 구독자 태그 적용 실패: {email} (id={subscriber_id})")
                return SubscriptionResult(
                    success=False,
                    message=ERROR_MESSAGES["tags_update_error"],
                )

            logger.info(f"신규 구독 완료: {email} (id={subscriber_id})")
            return SubscriptionResult(
                success=True,
                message=SUCCESS_MESSAGES["subscription_new"],
                subscriber_id=subscriber_id,
            )

        except Exception as e:
            logger.exception(f"구독 처리 중 오류: {email} - {e}")
            return SubscriptionResult(
                success=False,
                message=ERROR_MESSAGES["server_error"],
            )

    async def unsubscribe(self, email: str) -> SubscriptionResult:
        """구독 해지 (조회 → 삭제)"""
        try:
            lookup = await self.client.lookup_by_email(email)
            if not lookup.found or not lookup.subscriber:
                logger.warning(f"구독 해지 대상 없음: {email}")
                return SubscriptionResult(
                    success=False,
                    message=ERROR_MESSAGES["email_not_subscribed"],
                )

            subscriber_id = lookup.subscriber.id
            logger.info(f"구독 해지 요청: {email} (id={subscriber_id})")

            if not await self.client.remove(subscriber_id):
                return SubscriptionResult(
                    success=False,
                    message=ERROR_MESSAGES["server_error"],
                )

            logger.info(f"구독 해지 완료: {email}")
            return SubscriptionResult(
                success=True,
                message=SUCCESS_MESSAGES["unsubscription"],
                subscriber_id=subscriber_id,
            )

        except Exception as e:
            logger.exception(f"구독 해지 중 오류: {email} - {e}")
            return SubscriptionResult(
                success=False,
                message=ERROR_MESSAGES["server_error"],
            )
