"""
헬스체크 모듈

외부 연동 설정(Beehiiv, SMTP) 상태를 점검한다. 네트워크 호출은 하지 않는다.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..config import Settings

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"


def _check(component: str, status: str, message: str) -> Dict[str, str]:
    return {"component": component, "status": status, "message": message}


def check_registry(config: Settings) -> Dict[str, str]:
    """Beehiiv 설정 점검"""
    if not config.registry_configured:
        return _check("registry", UNHEALTHY, "Beehiiv API 키 또는 퍼블리케이션 ID가 없습니다")
    return _check("registry", HEALTHY, "Beehiiv 설정 확인")


def check_email(config: Settings) -> Dict[str, str]:
    """SMTP 설정 점검"""
    if not config.email_configured:
        return _check("email", DEGRADED, "SMTP 설정이 완료되지 않았습니다")
    return _check("email", HEALTHY, "SMTP 설정 확인")


def check_health(config: Settings) -> Dict[str, Any]:
    """전체 헬스체크: 모든 항목이 healthy일 때만 healthy"""
    checks: List[Dict[str, str]] = [check_registry(config), check_email(config)]

    status = HEALTHY
    for check in checks:
        if check["status"] == UNHEALTHY:
            status = UNHEALTHY
            break
        if check["status"] != HEALTHY:
            status = DEGRADED

    if status != HEALTHY:
        logger.warning(f"헬스체크 상태: {status} - {[c['component'] for c in checks if c['status'] != HEALTHY]}")

    return {
        "status": status,
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.version,
    }
