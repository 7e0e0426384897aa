"""
blog-backend 설정 관리 모듈
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 프로젝트 경로
    BASE_DIR: Path = Path(__file__).parent.parent

    # 버전
    version: str = Field(default="0.1.0", env="VERSION")

    # Beehiiv 구독자 레지스트리
    beehiiv_api_key: str = Field(default="", env="BEEHIIV_API_KEY")
    beehiiv_pub_id: str = Field(default="", env="BEEHIIV_PUB_ID")
    beehiiv_api_url: str = Field(
        default="https://api.beehiiv.com/v2",
        env="BEEHIIV_API_URL"
    )
    registry_timeout: float = Field(default=10.0, env="REGISTRY_TIMEOUT")

    # SMTP
    email_host: str = Field(default="smtp.gmail.com", env="EMAIL_HOST")
    email_port: int = Field(default=587, env="EMAIL_PORT")
    email_user: str = Field(default="", env="EMAIL_USER")
    email_pass: str = Field(default="", env="EMAIL_PASS")
    email_from: str = Field(default="", env="EMAIL_FROM")
    email_secure: bool = Field(default=False, env="EMAIL_SECURE")
    smtp_timeout: float = Field(default=30.0, env="SMTP_TIMEOUT")

    # 사이트 메타데이터
    site_title: str = Field(default="mlorente.dev", env="SITE_TITLE")
    site_author: str = Field(default="Manuel Lorente", env="SITE_AUTHOR")
    site_domain: str = Field(default="mlorente.dev", env="SITE_DOMAIN")
    site_mail: str = Field(default="", env="SITE_MAIL")
    site_url: str = Field(default="https://mlorente.dev", env="SITE_URL")

    # 리소스 이메일 지연 발송 (분)
    resource_email_delay_minutes: int = Field(default=1, env="RESOURCE_EMAIL_DELAY_MINUTES")

    # 웹 서버
    web_host: str = Field(default="0.0.0.0", env="WEB_HOST")
    web_port: int = Field(default=8080, env="WEB_PORT")
    # 쉼표로 구분 (예: https://mlorente.dev,https://www.mlorente.dev)
    cors_allow_origins: str = Field(default="*", env="CORS_ALLOW_ORIGINS")

    # 로깅
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    class Config:
        env_file = Path(__file__).parent.parent / ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def email_configured(self) -> bool:
        """SMTP 설정 완료 여부"""
        return bool(
            self.email_host and self.email_port
            and self.email_user and self.email_pass
        )

    @property
    def cors_origins(self) -> List[str]:
        """CORS 허용 Origin 목록"""
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]

    @property
    def registry_configured(self) -> bool:
        """Beehiiv 설정 완료 여부"""
        return bool(self.beehiiv_api_key and self.beehiiv_pub_id)


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()


settings = get_settings()
