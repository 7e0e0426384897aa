"""
도메인 모델 / 리소스 카탈로그 / 설정 테스트
"""

import pytest

from blog_backend.config import Settings
from blog_backend.common.models import Subscriber
from blog_backend.common.resources import RESOURCES, get_resource, get_resource_tags


class TestSubscriberFromPayload:

    def test_mixed_tag_formats(self):
        subscriber = Subscriber.from_payload({
            "id": "sub_1", "email": "a@x.com", "tags": ["devops", {"name": "new"}],
        })

        assert subscriber.tags == frozenset({"devops", "new"})

    @pytest.mark.parametrize("tags", [
        [{"name": ["x"]}],
        [{"name": {"nested": True}}],
        [["devops"]],
        [{"id": "tag_1"}],
        [None, 3, ""],
    ])
    def test_non_string_tag_names_are_ignored(self, tags):
        subscriber = Subscriber.from_payload({"id": "sub_1", "email": "a@x.com", "tags": tags})

        assert subscriber is not None
        assert subscriber.tags == frozenset()

    def test_tags_not_a_list(self):
        subscriber = Subscriber.from_payload({"id": "sub_1", "tags": "devops"})

        assert subscriber.tags == frozenset()

    @pytest.mark.parametrize("payload", [None, [], "sub_1", {}, {"id": 42}, {"email": "a@x.com"}])
    def test_missing_id_returns_none(self, payload):
        assert Subscriber.from_payload(payload) is None


class TestResourceCatalog:

    def test_known_resource(self):
        resource = get_resource("kubernetes-cheatsheet")

        assert resource.title == "쿠버네티스 치트시트"
        assert "kubernetes" in resource.tags

    def test_unknown_resource(self):
        assert get_resource("missing") is None

    def test_catalog_ids_match_keys(self):
        assert all(key == resource.id for key, resource in RESOURCES.items())

    def test_tags_merge_without_duplicates(self):
        tags = get_resource_tags("devops-checklist", ["devops", "newsletter"])

        assert tags == ["devops", "newsletter", "lead-magnet", "resource-devops-checklist"]

    def test_tags_for_unknown_resource(self):
        assert get_resource_tags("custom", None) == ["resource-custom"]


class TestSettings:

    def test_cors_origins_default(self):
        assert Settings().cors_origins == ["*"]

    def test_cors_origins_comma_separated(self):
        config = Settings(cors_allow_origins="https://mlorente.dev, https://www.mlorente.dev,")

        assert config.cors_origins == ["https://mlorente.dev", "https://www.mlorente.dev"]

    def test_cors_origins_from_plain_env_value(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://mlorente.dev")

        assert Settings().cors_origins == ["https://mlorente.dev"]
