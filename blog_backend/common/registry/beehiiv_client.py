"""
Beehiiv 구독자 레지스트리 클라이언트

API Endpoints (publications/{pub_id} 하위):
  - GET    /subscriptions/by_email/{email}  → 이메일로 구독자 조회
  - POST   /subscriptions                   → 구독자 생성
  - POST   /subscriptions/{id}/tags         → 태그 추가
  - DELETE /subscriptions/{id}              → 구독자 삭제 (204)

모든 호출은 1회만 시도하며, 실패는 예외 대신 결과 값으로 반환한다.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..models import Subscriber, SubscriptionSource
from ...config import settings

logger = logging.getLogger(__name__)

DELETED_STATUS_CODE = 204


@dataclass
class LookupResult:
    """이메일 조회 결과"""
    found: bool
    subscriber: Optional[Subscriber] = None


@dataclass
class CreateResult:
    """구독자 생성 결과"""
    created: bool
    subscriber: Optional[Subscriber] = None


class BeehiivClient:
    """Beehiiv API 클라이언트"""

    def __init__(
        self,
        api_key: str = None,
        publication_id: str = None,
        api_base_url: str = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.api_key = api_key if api_key is not None else settings.beehiiv_api_key
        self.publication_id = (
            publication_id if publication_id is not None else settings.beehiiv_pub_id
        )
        self.api_base_url = (api_base_url or settings.beehiiv_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.registry_timeout
        self._transport = transport

        if not self.api_key or not self.publication_id:
            logger.warning(
                "Beehiiv 설정이 완료되지 않았습니다. "
                ".env 파일에 BEEHIIV_API_KEY와 BEEHIIV_PUB_ID를 설정하세요."
            )

    @property
    def subscriptions_url(self) -> str:
        return f"{self.api_base_url}/publications/{self.publication_id}/subscriptions"

    async def _request(self, method: str, path: str = "", json: Any = None) -> httpx.Response:
        """API 요청 (재시도 없음)"""
        url = f"{self.subscriptions_url}{path}"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.request(method, url, headers=headers, json=json)

    @staticmethod
    def _parse_subscriber(response: httpx.Response) -> Optional[Subscriber]:
        """응답 본문의 data 객체를 Subscriber로 변환. 형식 오류 시 None"""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        return Subscriber.from_payload(body.get("data"))

    async def lookup_by_email(self, email: str) -> LookupResult:
        """이메일로 구독자 조회 - GET /by_email/{email}

        네트워크 오류, 타임아웃, 잘못된 응답은 모두 미존재로 처리한다.
        """
        try:
            response = await self._request("GET", f"/by_email/{quote(email, safe='@')}")
        except httpx.HTTPError as e:
            logger.error(f"Beehiiv 구독자 조회 실패: {email} - {e}")
            return LookupResult(found=False)

        subscriber = self._parse_subscriber(response)
        if subscriber is None:
            logger.info(f"구독자 없음: {email} (status={response.status_code})")
            return LookupResult(found=False)

        logger.info(f"기존 구독자 확인: {email} (id={subscriber.id})")
        return LookupResult(found=True, subscriber=subscriber)

    async def create(self, email: str, source: SubscriptionSource) -> CreateResult:
        """구독자 생성 - POST /

        삭제된 구독자는 재활성화하고, 웰컴 메일은 Beehiiv가 발송한다.
        """
        source_value = SubscriptionSource(source).value
        logger.info(f"구독자 생성 요청: {email} (utm_source={source_value})")

        payload = {
            "email": email,
            "utm_source": source_value,
            "reactivate_existing": True,
            "send_welcome_email": True,
        }
        try:
            response = await self._request("POST", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Beehiiv 구독자 생성 실패: {email} - {e}")
            return CreateResult(created=False)

        subscriber = self._parse_subscriber(response)
        if subscriber is None:
            logger.error(
                f"Beehiiv 구독자 생성 실패: {email} "
                f"(status={response.status_code}, body={response.text[:500]})"
            )
            return CreateResult(created=False)

        logger.info(f"신규 구독자 생성: {email} (id={subscriber.id})")
        return CreateResult(created=True, subscriber=subscriber)

    async def add_tag(self, subscriber_id: str, tag: str) -> bool:
        """구독자 태그 추가 - POST /{id}/tags"""
        if not tag:
            logger.warning(f"빈 태그는 추가하지 않습니다: subscriber={subscriber_id}")
            return False

        try:
            response = await self._request(
                "POST", f"/{subscriber_id}/tags", json={"tags": [tag]}
            )
        except httpx.HTTPError as e:
            logger.error(f"태그 추가 실패: subscriber={subscriber_id}, tag={tag} - {e}")
            return False

        if not response.is_success or self._parse_subscriber(response) is None:
            logger.error(
                f"태그 추가 실패: subscriber={subscriber_id}, tag={tag} "
                f"(status={response.status_code}, body={response.text[:500]})"
            )
            return False

        logger.info(f"태그 추가 완료: subscriber={subscriber_id}, tag={tag}")
        return True

    async def remove(self, subscriber_id: str) -> bool:
        """구독자 삭제 - DELETE /{id}. 204 응답만 성공으로 처리"""
        try:
            response = await self._request("DELETE", f"/{subscriber_id}")
        except httpx.HTTPError as e:
            logger.error(f"구독자 삭제 실패: subscriber={subscriber_id} - {e}")
            return False

        if response.status_code == DELETED_STATUS_CODE:
            logger.info(f"구독자 삭제 완료: subscriber={subscriber_id}")
            return True

        try:
            error_data = response.json()
        except ValueError:
            error_data = {"status": response.status_code}
        logger.error(f"구독자 삭제 실패: subscriber={subscriber_id} - {error_data}")
        return False
