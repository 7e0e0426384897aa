"""
SMTP 이메일 발송 모듈
"""

import logging
import smtplib
import socket
import uuid
import time
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.header import Header
from email.utils import formataddr
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ...config import settings

logger = logging.getLogger(__name__)


class SmtpErrorKind(str, Enum):
    """발송 실패 유형"""
    AUTHENTICATION = "authentication"
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    UNKNOWN = "unknown"


ERROR_KIND_LABELS = {
    SmtpErrorKind.AUTHENTICATION: "SMTP 인증 실패. 계정 정보를 확인하세요.",
    SmtpErrorKind.CONNECTION: "SMTP 연결 오류. 네트워크 또는 방화벽을 확인하세요.",
    SmtpErrorKind.TIMEOUT: "SMTP 연결 시간 초과. 네트워크를 확인하세요.",
    SmtpErrorKind.SERVER_ERROR: "메일 서버 오류 응답.",
    SmtpErrorKind.CLIENT_ERROR: "메일 요청 오류 응답.",
    SmtpErrorKind.UNKNOWN: "알 수 없는 발송 오류.",
}


@dataclass
class SendResult:
    """발송 결과"""
    recipient: str
    success: bool
    error_message: Optional[str] = None
    error_kind: Optional[SmtpErrorKind] = None


def _kind_from_code(code: Optional[int]) -> SmtpErrorKind:
    if code is None:
        return SmtpErrorKind.UNKNOWN
    if code >= 500:
        return SmtpErrorKind.SERVER_ERROR
    if code >= 400:
        return SmtpErrorKind.CLIENT_ERROR
    return SmtpErrorKind.UNKNOWN


def classify_smtp_error(error: BaseException) -> SmtpErrorKind:
    """smtplib / 소켓 예외를 발송 실패 유형으로 분류"""
    if isinstance(error, smtplib.SMTPAuthenticationError):
        return SmtpErrorKind.AUTHENTICATION
    if isinstance(error, (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected)):
        return SmtpErrorKind.CONNECTION
    if isinstance(error, (socket.timeout, TimeoutError)):
        return SmtpErrorKind.TIMEOUT
    if isinstance(error, smtplib.SMTPResponseException):
        return _kind_from_code(error.smtp_code)
    if isinstance(error, smtplib.SMTPRecipientsRefused):
        codes = [code for code, _ in error.recipients.values()]
        return _kind_from_code(max(codes) if codes else None)
    if isinstance(error, OSError):
        return SmtpErrorKind.CONNECTION
    return SmtpErrorKind.UNKNOWN


class SmtpSender:
    """SMTP 이메일 발송기"""

    def __init__(
        self,
        host: str = None,
        port: int = None,
        username: str = None,
        password: str = None,
        from_address: str = None,
        use_ssl: bool = None,
        timeout: float = None,
    ):
        self.host = host or settings.email_host
        self.port = port or settings.email_port
        self.username = username if username is not None else settings.email_user
        self.password = password if password is not None else settings.email_pass
        self.from_address = from_address or settings.email_from or self.username
        self.use_ssl = settings.email_secure if use_ssl is None else use_ssl
        self.timeout = timeout or settings.smtp_timeout

        if not self.is_configured:
            logger.warning(
                "SMTP 설정이 완료되지 않았습니다. "
                ".env 파일에 EMAIL_HOST, EMAIL_PORT, EMAIL_USER, EMAIL_PASS를 설정하세요."
            )

    @property
    def is_configured(self) -> bool:
        """SMTP 설정 완료 여부"""
        return bool(self.host and self.port and self.username and self.password)

    def _build_message(
        self,
        recipient: str,
        subject: str,
        html_content: str,
        sender_name: str,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = Header(subject, "utf-8")
        safe_sender_name = sender_name.replace('\r', '').replace('\n', '').replace('\x00', '')
        message["From"] = formataddr((safe_sender_name, self.from_address))
        message["To"] = recipient
        domain = self.from_address.rsplit("@", 1)[-1] if "@" in self.from_address else "localhost"
        message["Message-ID"] = f"<{time.time_ns()}-{uuid.uuid4().hex[:8]}@{domain}>"
        for key, value in (extra_headers or {}).items():
            message[key] = value

        message.attach(MIMEText(html_content, "html", "utf-8"))
        return message

    def _connect(self) -> smtplib.SMTP:
        """SMTP 서버 연결 (EMAIL_SECURE면 SSL)"""
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout)

    def send(
        self,
        recipient: str,
        subject: str,
        html_content: str,
        sender_name: str = "blog-backend",
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> SendResult:
        """이메일 발송"""
        if not self.is_configured:
            return SendResult(
                recipient=recipient,
                success=False,
                error_message="SMTP 설정이 완료되지 않았습니다.",
                error_kind=SmtpErrorKind.CLIENT_ERROR,
            )

        try:
            message = self._build_message(
                recipient, subject, html_content, sender_name, extra_headers
            )
            with self._connect() as server:
                if not self.use_ssl:
                    server.starttls()
                server.login(self.username, self.password)
                server.sendmail(self.from_address, recipient, message.as_string())

            logger.info(f"이메일 발송 성공: {recipient}")
            return SendResult(recipient=recipient, success=True)

        except Exception as e:
            kind = classify_smtp_error(e)
            logger.error(f"이메일 발송 실패: {recipient} - {ERROR_KIND_LABELS[kind]} ({e})")
            return SendResult(
                recipient=recipient,
                success=False,
                error_message=str(e),
                error_kind=kind,
            )
