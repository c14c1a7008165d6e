"""Tests for article and internal link schemas.

Tests cover:
- coerce_tags: list, JSON string, invalid input
- ArticleSnapshot: null columns defaulted, tags normalized
- NewInternalLink: self-links rejected, status defaults to applied
- LinkInstruction: camelCase aliases and field names, default link type
"""

import pytest
from pydantic import ValidationError

from autoblog.schemas.article import ArticleSnapshot, coerce_tags
from autoblog.schemas.internal_link import LinkInstruction, NewInternalLink

# ---------------------------------------------------------------------------
# coerce_tags / ArticleSnapshot
# ---------------------------------------------------------------------------


class TestCoerceTags:
    def test_list_kept(self) -> None:
        assert coerce_tags(["seo", "saas"]) == ["seo", "saas"]

    def test_json_string_decoded(self) -> None:
        assert coerce_tags('["seo", "saas"]') == ["seo", "saas"]

    def test_non_string_items_dropped(self) -> None:
        assert coerce_tags(["seo", 3, None, "saas"]) == ["seo", "saas"]

    @pytest.mark.parametrize("value", [None, "", "seo, saas", "{}", '"seo"', 42])
    def test_invalid_becomes_empty(self, value: object) -> None:
        assert coerce_tags(value) == []


class TestArticleSnapshot:
    def test_null_columns_defaulted(self) -> None:
        snapshot = ArticleSnapshot.model_validate(
            {
                "id": "a",
                "org_id": "org-1",
                "title": None,
                "slug": None,
                "content": None,
                "tags": None,
                "word_count": None,
                "status": "draft",
            }
        )

        assert snapshot.title == ""
        assert snapshot.content == ""
        assert snapshot.tags == []
        assert snapshot.word_count == 0

    def test_tags_string_normalized(self) -> None:
        snapshot = ArticleSnapshot(
            id="a", org_id="org-1", status="draft", tags='["growth"]'
        )
        assert snapshot.tags == ["growth"]


# ---------------------------------------------------------------------------
# NewInternalLink / LinkInstruction
# ---------------------------------------------------------------------------


class TestNewInternalLink:
    def test_self_link_rejected(self) -> None:
        with pytest.raises(ValidationError, match="cannot link to itself"):
            NewInternalLink(
                source_article_id="a",
                target_article_id="a",
                anchor_text="seo",
                link_type="related",
            )

    def test_status_defaults_to_applied(self) -> None:
        link = NewInternalLink(
            source_article_id="a",
            target_article_id="b",
            anchor_text="seo",
            link_type="contextual",
        )
        assert link.status == "applied"
        assert link.position_in_content is None


class TestLinkInstruction:
    def test_camel_case_aliases(self) -> None:
        instruction = LinkInstruction.model_validate(
            {"targetArticleId": "b", "anchorText": "seo", "linkType": "related"}
        )
        assert instruction.target_article_id == "b"
        assert instruction.anchor_text == "seo"
        assert instruction.link_type == "related"

    def test_field_names_and_default_type(self) -> None:
        instruction = LinkInstruction(target_article_id="b", anchor_text="seo")
        assert instruction.link_type == "contextual"

    def test_empty_anchor_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LinkInstruction(target_article_id="b", anchor_text="")
