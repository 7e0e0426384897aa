"""
blog-backend 웹 애플리케이션
뉴스레터 구독 / 구독 해지 / 리드 마그넷 리소스 발송 API
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings, settings as default_settings
from ..common.delivery.notifier import ResourceNotifier
from ..common.delivery.smtp_sender import SmtpSender
from ..common.health import check_health
from ..common.messages import ERROR_MESSAGES, SUCCESS_MESSAGES, SUCCESS_PAGES, ERROR_PAGES
from ..common.models import ResourceDeliveryRequest, SubscriptionSource
from ..common.registry.beehiiv_client import BeehiivClient
from ..common.resources import get_resource, get_resource_tags
from ..common.subscription.manager import SubscriptionManager
from ..common.template.renderer import TemplateRenderer
from ..common.utils import is_valid_email, generate_resource_title, generate_resource_url

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== 요청 모델 ====================

class SubscribeRequest(BaseModel):
    """구독 요청"""
    model_config = ConfigDict(populate_by_name=True)

    email: str = ""
    tags: List[str] = Field(default_factory=list)
    utm_source: Optional[SubscriptionSource] = Field(default=None, alias="utmSource")


class UnsubscribeRequest(BaseModel):
    """구독 해지 요청"""
    email: str = ""


class LeadMagnetRequest(BaseModel):
    """리드 마그넷 요청 (구독 + 리소스 지연 발송)"""
    model_config = ConfigDict(populate_by_name=True)

    email: str = ""
    resource_id: str = Field(default="", alias="resourceId")
    file_id: str = Field(default="", alias="fileId")
    tags: List[str] = Field(default_factory=list)


class ResourceEmailRequest(BaseModel):
    """리소스 이메일 즉시 발송 요청"""
    model_config = ConfigDict(populate_by_name=True)

    email: str = ""
    resource_id: str = Field(default="", alias="resourceId")
    resource_title: str = Field(default="", alias="resourceTitle")
    resource_link: str = Field(default="", alias="resourceLink")


# ==================== 의존성 ====================

def get_config(request: Request) -> Settings:
    return request.app.state.settings


def get_subscription_manager(request: Request) -> SubscriptionManager:
    return request.app.state.subscription_manager


def get_notifier(request: Request) -> ResourceNotifier:
    return request.app.state.notifier


def _error(status_code: int, key: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": ERROR_MESSAGES[key], **extra},
    )


# ==================== 라우트 ====================

@router.post("/api/subscribe")
async def subscribe(
    body: SubscribeRequest,
    manager: SubscriptionManager = Depends(get_subscription_manager),
):
    """구독 처리"""
    try:
        if not is_valid_email(body.email):
            logger.warning(f"구독 요청 이메일 형식 오류: {body.email!r}")
            return JSONResponse(
                status_code=400,
                content={"message": ERROR_MESSAGES["invalid_email"]},
            )

        result = await manager.process_subscription(
            body.email,
            body.tags,
            body.utm_source or SubscriptionSource.LANDING_PAGE,
        )
        return JSONResponse(
            status_code=200 if result.success else 500,
            content=result.to_response(),
        )

    except Exception as e:
        logger.exception(f"구독 API 오류: {e}")
        return JSONResponse(
            status_code=500,
            content={"message": ERROR_MESSAGES["server_error"]},
        )


@router.post("/api/unsubscribe")
async def unsubscribe(
    body: UnsubscribeRequest,
    manager: SubscriptionManager = Depends(get_subscription_manager),
):
    """구독 해지 처리 (JSON)"""
    try:
        if not is_valid_email(body.email):
            logger.warning(f"구독 해지 요청 이메일 형식 오류: {body.email!r}")
            return _error(400, "invalid_email")

        result = await manager.unsubscribe(body.email)
        return JSONResponse(
            status_code=200 if result.success else 500,
            content={"success": result.success, "message": result.message},
        )

    except Exception as e:
        logger.exception(f"구독 해지 API 오류: {e}")
        return _error(500, "server_error")


@router.get("/api/unsubscribe")
async def unsubscribe_redirect(
    email: str = "",
    manager: SubscriptionManager = Depends(get_subscription_manager),
):
    """구독 해지 처리 (이메일 링크용 GET, 결과 페이지로 리다이렉트)"""
    if not is_valid_email(email):
        logger.warning(f"구독 해지 링크 이메일 형식 오류: {email!r}")
        return _error(400, "invalid_email")

    try:
        result = await manager.unsubscribe(email)
        location = SUCCESS_PAGES["unsubscribe"] if result.success else ERROR_PAGES["not_found"]
    except Exception as e:
        logger.exception(f"구독 해지 링크 처리 오류: {e}")
        location = ERROR_PAGES["not_found"]

    return RedirectResponse(url=location, status_code=302)


@router.post("/api/lead-magnet")
async def lead_magnet(
    body: LeadMagnetRequest,
    config: Settings = Depends(get_config),
    manager: SubscriptionManager = Depends(get_subscription_manager),
    notifier: ResourceNotifier = Depends(get_notifier),
):
    """리드 마그넷 처리 - 구독 후 리소스 이메일 지연 발송"""
    try:
        if not notifier.is_configured:
            logger.error("SMTP 설정 누락으로 리드 마그넷 요청을 처리할 수 없습니다.")
            return _error(500, "email_config_error")

        if not body.email or not body.resource_id or not body.file_id:
            return _error(400, "incomplete_data")

        if not is_valid_email(body.email):
            return _error(400, "invalid_email")

        resource = get_resource(body.resource_id)
        if resource is None:
            logger.info(f"카탈로그에 없는 리소스: {body.resource_id} (기본 제목 사용)")

        result = await manager.process_subscription(
            body.email,
            get_resource_tags(body.resource_id, body.tags),
            SubscriptionSource.LEAD_MAGNET,
        )
        if not result.success:
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": result.message},
            )

        try:
            notifier.schedule_resource_notification(
                ResourceDeliveryRequest(
                    email=body.email,
                    resource_id=body.resource_id,
                    resource_title=generate_resource_title(
                        body.resource_id, resource.title if resource else None
                    ),
                    resource_link=generate_resource_url(body.file_id),
                ),
                delay_minutes=config.resource_email_delay_minutes,
            )
        except Exception as e:
            logger.exception(f"리소스 이메일 예약 실패: {body.email} - {e}")

        logger.info(f"리드 마그넷 처리 완료: {body.email} (resource={body.resource_id})")
        return JSONResponse(
            status_code=200,
            content={"success": True, "message": SUCCESS_MESSAGES["resource_sent"]},
        )

    except Exception as e:
        logger.exception(f"리드 마그넷 API 오류: {e}")
        return _error(500, "server_error")


@router.post("/api/resource-email")
async def resource_email(
    body: ResourceEmailRequest,
    notifier: ResourceNotifier = Depends(get_notifier),
):
    """리소스 이메일 즉시 발송"""
    try:
        if not notifier.is_configured:
            logger.error("SMTP 설정 누락으로 리소스 이메일을 보낼 수 없습니다.")
            return _error(500, "email_config_error")

        if not body.email or not body.resource_id or not body.resource_link:
            return _error(400, "incomplete_data")

        if not is_valid_email(body.email):
            return _error(400, "invalid_email")

        sent = await notifier.send_resource_notification(
            ResourceDeliveryRequest(
                email=body.email,
                resource_id=body.resource_id,
                resource_title=generate_resource_title(body.resource_id, body.resource_title),
                resource_link=body.resource_link,
            )
        )
        if not sent:
            return _error(500, "server_error")

        return JSONResponse(
            status_code=200,
            content={"success": True, "message": SUCCESS_MESSAGES["email_sent"]},
        )

    except Exception as e:
        logger.exception(f"리소스 이메일 API 오류: {e}")
        return _error(500, "server_error")


@router.get("/health")
@router.get("/healthz")
@router.get("/ready")
async def health(config: Settings = Depends(get_config)):
    """헬스체크"""
    return check_health(config)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """요청 본문 파싱/검증 실패 → 400"""
    logger.warning(f"요청 검증 실패: {request.method} {request.url.path} - {exc.errors()}")
    return _error(400, "incomplete_data")


# ==================== 앱 생성 ====================

def create_app(
    config: Settings = None,
    subscription_manager: SubscriptionManager = None,
    notifier: ResourceNotifier = None,
) -> FastAPI:
    """FastAPI 앱 생성 - 외부 연동 객체는 여기서 한 번만 만든다"""
    config = config or default_settings

    if subscription_manager is None:
        subscription_manager = SubscriptionManager(BeehiivClient(
            api_key=config.beehiiv_api_key,
            publication_id=config.beehiiv_pub_id,
            api_base_url=config.beehiiv_api_url,
            timeout=config.registry_timeout,
        ))

    if notifier is None:
        notifier = ResourceNotifier(
            sender=SmtpSender(
                host=config.email_host,
                port=config.email_port,
                username=config.email_user,
                password=config.email_pass,
                from_address=config.email_from,
                use_ssl=config.email_secure,
                timeout=config.smtp_timeout,
            ),
            renderer=TemplateRenderer(),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.notifier.aclose()

    app = FastAPI(
        title="blog-backend",
        description="블로그 뉴스레터 구독 및 리소스 발송 API",
        version=config.version,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.subscription_manager = subscription_manager
    app.state.notifier = notifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Content-Type", "Accept-Encoding", "X-CSRF-Token", "Authorization",
            "HX-Request", "HX-Trigger", "HX-Trigger-Name", "HX-Target",
            "HX-Current-URL", "HX-Boost",
        ],
        expose_headers=["HX-Redirect", "HX-Trigger", "HX-Refresh", "HX-Location"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(router)

    return app


app = create_app()


# ==================== 서버 실행 ====================

def run_server():
    """웹 서버 실행"""
    import uvicorn

    logger.info(f"웹 서버 시작: http://{default_settings.web_host}:{default_settings.web_port}")
    uvicorn.run(
        app,
        host=default_settings.web_host,
        port=default_settings.web_port,
        log_level=default_settings.log_level.lower(),
    )
