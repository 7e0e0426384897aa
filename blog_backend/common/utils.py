"""
공통 유틸리티
구독/리소스 관련 순수 규칙
"""

import re
from typing import List, Optional

from .models import SubscriptionTag

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

GOOGLE_DRIVE_VIEW_URL = "https://drive.google.com/file/d/{file_id}/view?usp=drive_link"

MIN_EMAIL_DELAY_MINUTES = 1


def is_valid_email(email: Optional[str]) -> bool:
    """이메일 형식 검증"""
    if not email or not isinstance(email, str):
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def get_tags_for_new_subscriber(custom_tags: Optional[List[str]] = None) -> List[str]:
    """신규 구독자에게 적용할 태그 (new 마커 + 요청 태그)"""
    return [SubscriptionTag.NEW_SUBSCRIBER.value, *(custom_tags or [])]


def generate_resource_title(resource_id: str, custom_title: Optional[str] = None) -> str:
    """리소스 제목 생성 - 사용자 지정 제목이 없으면 ID 기반"""
    if custom_title and custom_title.strip():
        return custom_title
    return f"자료 {resource_id}"


def generate_resource_url(file_id: str) -> str:
    """Google Drive 파일 ID로 공유 링크 생성"""
    return GOOGLE_DRIVE_VIEW_URL.format(file_id=file_id)


def get_email_delay(minutes: Optional[int] = MIN_EMAIL_DELAY_MINUTES) -> int:
    """지연 발송 대기 시간 (초). 최소 1분"""
    if not minutes or minutes < MIN_EMAIL_DELAY_MINUTES:
        minutes = MIN_EMAIL_DELAY_MINUTES
    return minutes * 60
