"""Unit tests for the curated topic knowledge base."""

import pytest

from mortgagebroker.models.advisor import TopicCategory
from mortgagebroker.services.knowledge_base import (
    GENERIC_FOLLOW_UPS,
    TOPIC_ANSWERS,
    TopicKnowledgeBase,
)


class TestTopicKnowledgeBase:
    """Test cases for knowledge base lookups."""

    def test_every_category_has_an_answer(self, knowledge_base):
        for category in TopicCategory:
            answer = knowledge_base.lookup(category)
            assert answer is not None, category
            assert answer.summary
            assert 3 <= len(answer.highlights) <= 6

    def test_general_entry(self, knowledge_base):
        general = knowledge_base.general()
        assert general.summary.startswith("Based on standard mortgage guidelines")

    def test_documents_answer(self, knowledge_base):
        documents = knowledge_base.lookup(TopicCategory.DOCUMENTS)
        assert documents.summary.startswith(
            "For mortgage pre-approval, you'll typically need"
        )
        assert len(documents.highlights) == 4

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            TOPIC_ANSWERS[TopicCategory.GENERAL] = None

    def test_lookup_is_idempotent(self, knowledge_base):
        for category in TopicCategory:
            assert knowledge_base.lookup(category) == knowledge_base.lookup(category)
            assert knowledge_base.follow_ups(category) == knowledge_base.follow_ups(
                category
            )

    def test_missing_entry_returns_none(self):
        knowledge_base = TopicKnowledgeBase(
            answers={TopicCategory.GENERAL: TOPIC_ANSWERS[TopicCategory.GENERAL]}
        )
        assert knowledge_base.lookup(TopicCategory.PMI) is None


class TestRelevantInsights:
    """Test cases for keyword-matched insights."""

    def test_matches_in_table_order(self, knowledge_base):
        insights = knowledge_base.relevant_insights({"closing"})
        assert len(insights) == 2
        assert insights[0].startswith("Common closing costs")
        assert insights[1].startswith("The loan application process")

    def test_limit_applies(self, knowledge_base):
        insights = knowledge_base.relevant_insights({"loans"}, limit=2)
        assert len(insights) == 2

    def test_no_keywords_no_insights(self, knowledge_base):
        assert knowledge_base.relevant_insights(set()) == []
        assert knowledge_base.relevant_insights({"zzzz"}) == []


class TestFollowUps:
    """Test cases for follow-up derivation."""

    def test_category_follow_ups(self, knowledge_base):
        follow_ups = knowledge_base.follow_ups(TopicCategory.PMI)
        assert follow_ups == [
            "How much do I need for a down payment?",
            "Would you like to calculate your estimated monthly payment?",
        ]

    def test_general_uses_generic_trio(self, knowledge_base):
        assert knowledge_base.follow_ups(TopicCategory.GENERAL) == list(
            GENERIC_FOLLOW_UPS
        )

    def test_truncated_to_three_and_deduplicated(self):
        knowledge_base = TopicKnowledgeBase(
            follow_ups={
                TopicCategory.CREDIT: ("A?", "A?", "B?", "C?", "D?", "E?"),
            }
        )
        assert knowledge_base.follow_ups(TopicCategory.CREDIT) == ["A?", "B?", "C?"]

    def test_never_more_than_three(self, knowledge_base):
        for category in TopicCategory:
            assert 1 <= len(knowledge_base.follow_ups(category)) <= 3
