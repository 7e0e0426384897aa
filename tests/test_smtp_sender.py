"""
SMTP 발송기 / 오류 분류 테스트
"""

import smtplib
import socket
from unittest.mock import patch

import pytest

from blog_backend.common.delivery.smtp_sender import (
    SmtpErrorKind, SmtpSender, classify_smtp_error
)


@pytest.mark.parametrize("error, expected", [
    (smtplib.SMTPAuthenticationError(535, b"bad credentials"), SmtpErrorKind.AUTHENTICATION),
    (smtplib.SMTPConnectError(421, b"service not available"), SmtpErrorKind.CONNECTION),
    (smtplib.SMTPServerDisconnected("closed"), SmtpErrorKind.CONNECTION),
    (socket.timeout("timed out"), SmtpErrorKind.TIMEOUT),
    (smtplib.SMTPDataError(554, b"rejected"), SmtpErrorKind.SERVER_ERROR),
    (smtplib.SMTPSenderRefused(451, b"try later", "from@x.com"), SmtpErrorKind.CLIENT_ERROR),
    (smtplib.SMTPRecipientsRefused({"a@x.com": (550, b"no such user")}), SmtpErrorKind.SERVER_ERROR),
    (ConnectionRefusedError("refused"), SmtpErrorKind.CONNECTION),
    (ValueError("unexpected"), SmtpErrorKind.UNKNOWN),
])
def test_classify_smtp_error(error, expected):
    assert classify_smtp_error(error) == expected


def make_sender(**overrides) -> SmtpSender:
    values = {
        "host": "smtp.test.local",
        "port": 587,
        "username": "sender@test.local",
        "password": "secret",
        "from_address": "sender@test.local",
        "use_ssl": False,
        "timeout": 5,
    }
    values.update(overrides)
    return SmtpSender(**values)


class TestSmtpSender:

    def test_unconfigured_sender_does_not_connect(self):
        sender = make_sender(username="", password="")

        with patch("blog_backend.common.delivery.smtp_sender.smtplib.SMTP") as mock_smtp:
            result = sender.send("a@x.com", "subject", "<p>hi</p>")

        assert result.success is False
        assert result.error_kind == SmtpErrorKind.CLIENT_ERROR
        mock_smtp.assert_not_called()

    def test_send_uses_starttls_and_login(self):
        sender = make_sender()

        with patch("blog_backend.common.delivery.smtp_sender.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            result = sender.send(
                "a@x.com", "제목", "<p>본문</p>", extra_headers={"Precedence": "bulk"}
            )

        assert result.success is True
        mock_smtp.assert_called_once_with("smtp.test.local", 587, timeout=5)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("sender@test.local", "secret")
        from_address, recipient, raw = server.sendmail.call_args.args
        assert from_address == "sender@test.local"
        assert recipient == "a@x.com"
        assert "Precedence: bulk" in raw

    def test_send_over_ssl_skips_starttls(self):
        sender = make_sender(port=465, use_ssl=True)

        with patch("blog_backend.common.delivery.smtp_sender.smtplib.SMTP_SSL") as mock_ssl:
            server = mock_ssl.return_value.__enter__.return_value
            result = sender.send("a@x.com", "subject", "<p>hi</p>")

        assert result.success is True
        server.starttls.assert_not_called()

    def test_authentication_failure_is_classified(self):
        sender = make_sender()

        with patch("blog_backend.common.delivery.smtp_sender.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
            result = sender.send("a@x.com", "subject", "<p>hi</p>")

        assert result.success is False
        assert result.error_kind == SmtpErrorKind.AUTHENTICATION
        server.sendmail.assert_not_called()
