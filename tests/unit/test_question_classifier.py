"""Unit tests for the keyword question classifier."""

import pytest

from mortgagebroker.models.advisor import Sentiment, TopicCategory
from mortgagebroker.services.question_classifier import (
    analyze,
    detect_sentiment,
    extract_keywords,
    is_edge_case,
    resolve_category,
)


class TestResolveCategory:
    """Test cases for category resolution."""

    @pytest.mark.parametrize(
        "question, expected",
        [
            ("Can I get a mortgage if I have a green card?", TopicCategory.CITIZENSHIP),
            ("How do lenders verify my income?", TopicCategory.INCOME_VERIFICATION),
            ("What FICO score do I need?", TopicCategory.CREDIT),
            ("How much down payment do I need?", TopicCategory.DOWNPAYMENT),
            ("What documents do I need for pre-approval?", TopicCategory.DOCUMENTS),
            ("How can I avoid PMI?", TopicCategory.PMI),
            ("What is a good debt-to-income ratio?", TopicCategory.DTI),
            ("What are typical closing costs?", TopicCategory.CLOSING),
            ("Should I lock my rate now?", TopicCategory.RATES),
            ("How long does pre-approval take?", TopicCategory.PREAPPROVAL),
            ("Tips for a first-time buyer?", TopicCategory.FIRST_TIME),
            ("I am self-employed, can I qualify?", TopicCategory.SELF_EMPLOYED),
            ("I went through bankruptcy two years ago", TopicCategory.CREDIT_ISSUES),
            ("Tell me about buying a house", TopicCategory.GENERAL),
        ],
    )
    def test_categories(self, question, expected):
        """Each category is reachable from a representative question."""
        assert resolve_category(question) == expected

    def test_first_matching_rule_wins(self):
        """Earlier rules take priority when several match."""
        # Mentions both documents and pre-approval; documents is checked first.
        assert (
            resolve_category("Which documents for preapproval?")
            == TopicCategory.DOCUMENTS
        )
        # Credit is checked before the credit issues rule.
        assert (
            resolve_category("Will a bankruptcy hurt my credit?")
            == TopicCategory.CREDIT
        )

    def test_matching_is_case_insensitive(self):
        assert resolve_category("WHAT IS PMI") == TopicCategory.PMI

    def test_word_boundaries(self):
        """Terms only match at the start of a word."""
        assert resolve_category("Is it advisable to wait?") == TopicCategory.GENERAL

    def test_empty_question_is_general(self):
        assert resolve_category("") == TopicCategory.GENERAL


class TestEdgeCasesAndSentiment:
    """Test cases for edge-case detection and sentiment."""

    @pytest.mark.parametrize(
        "question",
        [
            "I'm not a US citizen, can I buy?",
            "I haven't filed taxes in two years",
            "I'm self-employed with 1099 income",
            "I had a foreclosure in 2019",
            "Can I buy with zero down?",
            "I have a lot of debt from school",
        ],
    )
    def test_edge_cases_detected(self, question):
        assert is_edge_case(question) is True

    def test_ordinary_question_is_not_edge_case(self):
        assert is_edge_case("What documents do I need?") is False
        assert is_edge_case("Is it advisable to keep waiting?") is False

    def test_negation_is_negative(self):
        assert detect_sentiment("I cannot afford a big payment") == Sentiment.NEGATIVE
        assert detect_sentiment("I'm not sure where to start") == Sentiment.NEGATIVE

    def test_neutral_default(self):
        assert detect_sentiment("What is PMI?") == Sentiment.NEUTRAL

    def test_positive_is_never_produced(self):
        assert detect_sentiment("I love my great new job!") != Sentiment.POSITIVE


class TestKeywords:
    """Test cases for keyword extraction."""

    def test_short_tokens_dropped(self):
        keywords = extract_keywords("What is the PMI cost on a condo?")
        assert keywords == frozenset({"what", "cost", "condo"})

    def test_keywords_lowercased_and_deduplicated(self):
        keywords = extract_keywords("Closing closing CLOSING costs")
        assert keywords == frozenset({"closing", "costs"})

    def test_analyze_combines_results(self):
        analysis = analyze("I'm not a citizen, what documents are needed?")
        assert analysis.category == TopicCategory.CITIZENSHIP
        assert analysis.is_edge_case is True
        assert analysis.sentiment == Sentiment.NEGATIVE
        assert "documents" in analysis.keywords

    def test_dti_acronym(self):
        analysis = analyze("What is DTI and how is it calculated?")
        assert analysis.category == TopicCategory.DTI

    def test_non_citizen_question(self):
        analysis = analyze("I'm not a US citizen, can I get a mortgage?")
        assert analysis.category == TopicCategory.CITIZENSHIP
        assert analysis.is_edge_case is True
