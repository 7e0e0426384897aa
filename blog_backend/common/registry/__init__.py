"""구독자 레지스트리 (Beehiiv) 패키지"""

from .beehiiv_client import BeehiivClient, LookupResult, CreateResult

__all__ = ["BeehiivClient", "LookupResult", "CreateResult"]
