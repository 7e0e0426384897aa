"""
리소스 이메일 수동 발송 스크립트
리드 마그넷 지연 발송이 누락된 경우 재발송에 사용

사용법:
  python scripts/send_resource_email.py --email user@example.com --resource-id devops-checklist --file-id 1ABC
  python scripts/send_resource_email.py --email user@example.com --resource-id guide --link https://example.com/guide.pdf --title "가이드"
  python scripts/send_resource_email.py ... --dry-run   # 렌더링 결과만 출력
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from blog_backend.common.delivery.notifier import ResourceNotifier
from blog_backend.common.delivery.smtp_sender import SmtpSender
from blog_backend.common.models import ResourceDeliveryRequest
from blog_backend.common.resources import get_resource
from blog_backend.common.template.renderer import TemplateRenderer
from blog_backend.common.utils import (
    is_valid_email, generate_resource_title, generate_resource_url
)


def build_request(args) -> ResourceDeliveryRequest:
    """CLI 인자로 발송 요청 구성 (미지정 값은 카탈로그에서 보충)"""
    resource = get_resource(args.resource_id)
    file_id = args.file_id or (resource.file_id if resource else None)
    link = args.link or (generate_resource_url(file_id) if file_id else "")
    title = args.title or (resource.title if resource else None)
    return ResourceDeliveryRequest(
        email=args.email,
        resource_id=args.resource_id,
        resource_title=generate_resource_title(args.resource_id, title),
        resource_link=link,
    )


def main():
    parser = argparse.ArgumentParser(description="리소스 이메일 수동 발송")
    parser.add_argument("--email", required=True, help="수신자 이메일")
    parser.add_argument("--resource-id", required=True, help="리소스 ID")
    parser.add_argument("--file-id", help="Google Drive 파일 ID (--link 미지정 시, 기본: 카탈로그)")
    parser.add_argument("--link", help="리소스 링크")
    parser.add_argument("--title", help="리소스 제목 (기본: ID 기반)")
    parser.add_argument("--dry-run", action="store_true", help="발송하지 않고 렌더링 결과만 출력")
    args = parser.parse_args()

    if not is_valid_email(args.email):
        print(f"이메일 형식이 올바르지 않습니다: {args.email}")
        sys.exit(2)

    request = build_request(args)
    if not request.resource_link:
        print("카탈로그에 없는 리소스는 --file-id 또는 --link가 필요합니다.")
        sys.exit(2)

    renderer = TemplateRenderer()

    if args.dry_run:
        print(f"수신자: {request.email}")
        print(f"제목: 요청하신 자료: {request.resource_title}")
        print(renderer.render_resource_email(request.resource_title, request.resource_link))
        return

    notifier = ResourceNotifier(sender=SmtpSender(), renderer=renderer)
    if not notifier.is_configured:
        print("SMTP 설정이 완료되지 않았습니다. .env 파일을 확인하세요.")
        sys.exit(1)

    sent = asyncio.run(notifier.send_resource_notification(request))
    print("발송 완료" if sent else "발송 실패 (로그 확인)")
    sys.exit(0 if sent else 1)


if __name__ == "__main__":
    main()
