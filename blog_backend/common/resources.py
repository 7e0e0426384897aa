"""
리드 마그넷 리소스 카탈로그
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ResourceInfo:
    """리드 마그넷 리소스"""
    id: str
    title: str
    description: str
    file_id: str
    tags: List[str] = field(default_factory=list)


RESOURCES: Dict[str, ResourceInfo] = {
    # DevOps
    "devops-checklist": ResourceInfo(
        id="devops-checklist",
        title="DevOps 완벽 체크리스트",
        description="조직에 DevOps를 도입하기 위한 단계별 가이드",
        file_id="1ABC123xyz_GoogleDriveFileId",
        tags=["devops", "lead-magnet"],
    ),
    "cloud-architecture": ResourceInfo(
        id="cloud-architecture",
        title="클라우드 아키텍처 패턴",
        description="최신 클라우드 아키텍처에서 가장 많이 쓰이는 패턴 모음",
        file_id="1DEF456xyz_GoogleDriveFileId",
        tags=["cloud", "architecture", "lead-magnet"],
    ),
    # Kubernetes
    "kubernetes-cheatsheet": ResourceInfo(
        id="kubernetes-cheatsheet",
        title="쿠버네티스 치트시트",
        description="필수 kubectl 명령을 한 장에 정리",
        file_id="1GHI789xyz_GoogleDriveFileId",
        tags=["kubernetes", "devops", "lead-magnet"],
    ),
    # IaC
    "terraform-templates": ResourceInfo(
        id="terraform-templates",
        title="AWS용 Terraform 템플릿",
        description="인프라 프로젝트에 바로 쓸 수 있는 템플릿",
        file_id="1JKL012xyz_GoogleDriveFileId",
        tags=["terraform", "iac", "aws", "lead-magnet"],
    ),
}


def get_resource(resource_id: str) -> Optional[ResourceInfo]:
    """카탈로그에서 리소스 조회. 미등록 ID는 None"""
    return RESOURCES.get(resource_id)


def get_resource_tags(resource_id: str, custom_tags: Optional[List[str]] = None) -> List[str]:
    """리드 마그넷 구독 태그: 요청 태그 + 카탈로그 태그 + resource-{id} (중복 제거, 순서 유지)"""
    resource = get_resource(resource_id)
    tags = [*(custom_tags or []), *(resource.tags if resource else []), f"resource-{resource_id}"]
    return list(dict.fromkeys(tag for tag in tags if tag))
