"""
리소스 이메일 발송 (즉시 / 지연)

지연 발송은 구독 단계에서 Beehiiv가 보내는 웰컴 메일보다 늦게 도착하도록
백그라운드 태스크로 실행한다. 태스크 결과는 HTTP 응답과 무관하며 로그로만 남는다.
"""

import asyncio
import logging
from typing import Optional, Set

from .smtp_sender import SmtpSender, ERROR_KIND_LABELS
from ..models import ResourceDeliveryRequest
from ..template.renderer import TemplateRenderer
from ..utils import get_email_delay, MIN_EMAIL_DELAY_MINUTES
from ...config import settings

logger = logging.getLogger(__name__)


class ResourceDeliveryError(Exception):
    """지연 발송 실패"""

    def __init__(self, request: ResourceDeliveryRequest, reason: str = ""):
        self.request = request
        self.reason = reason
        super().__init__(
            f"리소스 이메일 발송 실패: {request.email} (resource={request.resource_id}) {reason}".strip()
        )


class ResourceNotifier:
    """리소스 이메일 발송기"""

    def __init__(self, sender: SmtpSender, renderer: TemplateRenderer):
        self.sender = sender
        self.renderer = renderer
        self._pending: Set[asyncio.Task] = set()

    @property
    def is_configured(self) -> bool:
        """메일 발송 설정 완료 여부"""
        return self.sender.is_configured

    @property
    def pending_count(self) -> int:
        """대기 중인 지연 발송 수"""
        return len(self._pending)

    def _build_headers(self) -> dict:
        headers = {
            "Precedence": "bulk",
            "X-Auto-Response-Suppress": "All",
            "X-Site-Origin": settings.site_title,
            "List-Unsubscribe": f"<{settings.site_url.rstrip('/')}/unsubscribe>",
            "List-Unsubscribe-Post": "List-Unsubscribe=One-Click",
        }
        if settings.site_mail:
            headers["Reply-To"] = settings.site_mail
        return headers

    async def send_resource_notification(self, request: ResourceDeliveryRequest) -> bool:
        """리소스 이메일 즉시 발송. 실패 시 False (예외 없음)"""
        if not request.email or not request.resource_link:
            logger.error(
                f"리소스 이메일 발송 정보 누락: email={request.email!r}, "
                f"resource={request.resource_id}, link={request.resource_link!r}"
            )
            return False

        try:
            html_content = self.renderer.render_resource_email(
                resource_title=request.resource_title,
                resource_link=request.resource_link,
            )
            result = await asyncio.to_thread(
                self.sender.send,
                recipient=request.email,
                subject=f"요청하신 자료: {request.resource_title}",
                html_content=html_content,
                sender_name=settings.site_author,
                extra_headers=self._build_headers(),
            )
        except Exception as e:
            logger.exception(f"리소스 이메일 발송 중 오류: {request.email} - {e}")
            return False

        if not result.success:
            label = ERROR_KIND_LABELS.get(result.error_kind, "")
            logger.error(
                f"리소스 이메일 발송 실패: {request.email} "
                f"(resource={request.resource_id}, kind={getattr(result.error_kind, 'value', None)}) "
                f"{label} {result.error_message or ''}".rstrip()
            )
            return False

        logger.info(f"리소스 이메일 발송 완료: {request.email} (resource={request.resource_id})")
        return True

    async def _deliver_later(self, request: ResourceDeliveryRequest, delay_seconds: int) -> bool:
        await asyncio.sleep(delay_seconds)
        if not await self.send_resource_notification(request):
            raise ResourceDeliveryError(request)
        return True

    def _on_delivery_done(self, task: asyncio.Task) -> None:
        """지연 발송 결과 로깅"""
        self._pending.discard(task)
        if task.cancelled():
            logger.warning(f"지연 발송 취소됨: {task.get_name()}")
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"지연 발송 실패: {error}")
        else:
            logger.info(f"지연 발송 완료: {task.get_name()}")

    def schedule_resource_notification(
        self,
        request: ResourceDeliveryRequest,
        delay_minutes: Optional[int] = None,
    ) -> asyncio.Task:
        """리소스 이메일 지연 발송 예약

        반환된 태스크는 발송 성공 시 True, 실패 시 ResourceDeliveryError로 완료된다.
        호출자는 기다리지 않아도 된다.
        """
        if delay_minutes is None:
            delay_minutes = request.delay_minutes
        if not delay_minutes or delay_minutes < MIN_EMAIL_DELAY_MINUTES:
            logger.warning(
                f"지연 시간이 최소값보다 작아 {MIN_EMAIL_DELAY_MINUTES}분으로 조정: "
                f"{request.email} (resource={request.resource_id})"
            )
            delay_minutes = MIN_EMAIL_DELAY_MINUTES

        task = asyncio.create_task(
            self._deliver_later(request, get_email_delay(delay_minutes)),
            name=f"resource-email:{request.resource_id}:{request.email}",
        )
        self._pending.add(task)
        task.add_done_callback(self._on_delivery_done)

        logger.info(
            f"리소스 이메일 지연 발송 예약: {request.email} "
            f"(resource={request.resource_id}, {delay_minutes}분 후)"
        )
        return task

    async def aclose(self) -> None:
        """종료 시 대기 중인 지연 발송 취소"""
        if not self._pending:
            return
        logger.warning(f"대기 중인 지연 발송 {len(self._pending)}건 취소")
        for task in list(self._pending):
            task.cancel()
        await asyncio.gather(*self._pending, return_exceptions=True)
