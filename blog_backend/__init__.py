"""
blog-backend
블로그 뉴스레터 구독 / 리드 마그넷 리소스 발송 API
"""

__version__ = "0.1.0"
