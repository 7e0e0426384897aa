"""
blog-backend 메인 실행 파일
뉴스레터 구독 / 리소스 발송 API 서버
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from .config import settings

logger = logging.getLogger(__name__)


def setup_logging():
    """로깅 설정 (콘솔 + 파일)"""
    log_dir = settings.BASE_DIR / "logs"
    log_dir.mkdir(exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / "blog-backend.log", encoding="utf-8"),
        ],
    )


async def check_subscriber(email: str) -> int:
    """레지스트리에서 구독자 1건 조회 (운영 점검용)"""
    from .common.registry.beehiiv_client import BeehiivClient

    result = await BeehiivClient().lookup_by_email(email)
    if not result.found:
        print(f"구독자 없음: {email}")
        return 1

    subscriber = result.subscriber
    tags = ", ".join(sorted(subscriber.tags)) or "-"
    print(f"구독자 확인: {subscriber.email or email} (id={subscriber.id}, tags={tags})")
    return 0


def main():
    """메인 함수"""
    import argparse

    parser = argparse.ArgumentParser(description="blog-backend - 뉴스레터 구독 / 리소스 발송 API")
    parser.add_argument("--web", action="store_true", help="웹 서버 실행 (기본)")
    parser.add_argument("--check-subscriber", metavar="EMAIL", help="Beehiiv 구독자 조회 후 종료")

    args = parser.parse_args()

    # 환경 변수 로드
    load_dotenv()

    setup_logging()

    if args.check_subscriber:
        sys.exit(asyncio.run(check_subscriber(args.check_subscriber)))

    logger.info("웹 서버 모드")
    from .web.app import run_server
    run_server()


if __name__ == "__main__":
    main()
