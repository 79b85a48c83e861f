"""Keyword heuristics that route a question to a topic category"""

import re

from mortgagebroker.models.advisor import QuestionAnalysis, Sentiment, TopicCategory


def _pattern(*terms: str) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(terms) + r")", re.IGNORECASE)


# Evaluated in order; the first matching rule decides the category.
CATEGORY_RULES: tuple[tuple[TopicCategory, re.Pattern], ...] = (
    (
        TopicCategory.CITIZENSHIP,
        _pattern(
            r"citizen",
            r"non-?citizen",
            r"green card",
            r"permanent resident",
            r"non-?resident",
            r"visa\b",
            r"itin\b",
            r"daca\b",
            r"immigra",
            r"undocumented",
        ),
    ),
    (
        TopicCategory.INCOME_VERIFICATION,
        _pattern(
            r"income verification",
            r"verify (?:my )?income",
            r"proof of income",
            r"pay ?stubs?\b",
            r"w-?2s?\b",
            r"tax returns?\b",
            r"filed (?:my )?taxes",
            r"file (?:my )?taxes",
        ),
    ),
    (TopicCategory.CREDIT, _pattern(r"credit", r"fico\b")),
    (
        TopicCategory.DOWNPAYMENT,
        _pattern(r"down ?payment", r"put down\b", r"how much down\b", r"zero down\b"),
    ),
    (TopicCategory.DOCUMENTS, _pattern(r"document", r"paperwork")),
    (
        TopicCategory.PMI,
        _pattern(r"pmi\b", r"mip\b", r"mortgage insurance"),
    ),
    (
        TopicCategory.DTI,
        _pattern(r"dti\b", r"debt[- ]to[- ]income"),
    ),
    (
        TopicCategory.CLOSING,
        _pattern(r"closing", r"fees\b", r"escrow"),
    ),
    (
        TopicCategory.RATES,
        _pattern(r"rates?\b", r"interest\b", r"apr\b", r"lock\b", r"points\b"),
    ),
    (
        TopicCategory.PREAPPROVAL,
        _pattern(r"pre-? ?approv", r"pre-? ?qualif"),
    ),
    (
        TopicCategory.FIRST_TIME,
        _pattern(r"first[- ]time", r"first home\b", r"never owned"),
    ),
    (
        TopicCategory.SELF_EMPLOYED,
        _pattern(
            r"self[- ]employ",
            r"own (?:a |my )?business",
            r"1099s?\b",
            r"freelanc",
            r"contractor",
        ),
    ),
    (
        TopicCategory.CREDIT_ISSUES,
        _pattern(
            r"bankrupt",
            r"foreclos",
            r"collections?\b",
            r"late payments?\b",
            r"charge-?offs?\b",
            r"short sale",
        ),
    ),
)

EDGE_CASE_MARKERS = (
    # Non-citizen status
    r"not an? (?:us |u\.s\. )?citizen",
    r"non-?citizen",
    r"green card",
    r"visas?\b",
    r"itin\b",
    r"daca\b",
    r"undocumented",
    # No tax filing history
    r"(?:haven't|have not|didn't|did not|never) filed",
    r"no tax returns?\b",
    # Self-employment
    r"self[- ]employ",
    r"1099s?\b",
    r"own (?:a |my )?business",
    # Bankruptcy or foreclosure
    r"bankrupt",
    r"foreclos",
    # Zero down payment
    r"(?:no|zero|0|nothing) (?:money )?down\b",
    r"no down ?payment",
    # High existing debt
    r"(?:high|a lot of|lots of|too much) (?:of )?debt",
    r"student loan debt",
)

NEGATION_MARKERS = ("not", "can't", "cannot", "no ", "wasn't")

_EDGE_CASE_PATTERN = re.compile(
    r"\b(?:" + "|".join(EDGE_CASE_MARKERS) + r")",
    re.IGNORECASE,
)

_TOKEN_SPLIT = re.compile(r"\W+")


def resolve_category(question: str) -> TopicCategory:
    """Return the first category whose rule matches, or GENERAL."""
    for category, pattern in CATEGORY_RULES:
        if pattern.search(question):
            return category
    return TopicCategory.GENERAL


def is_edge_case(question: str) -> bool:
    return _EDGE_CASE_PATTERN.search(question) is not None


def detect_sentiment(question: str) -> Sentiment:
    # POSITIVE is part of the vocabulary but no rule produces it.
    text = question.lower()
    if any(marker in text for marker in NEGATION_MARKERS):
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def extract_keywords(question: str) -> frozenset[str]:
    return frozenset(
        token for token in _TOKEN_SPLIT.split(question.lower()) if len(token) > 3
    )


def analyze(question: str) -> QuestionAnalysis:
    """
    Analyze a free-text question.

    Args:
        question: Raw question text from the user

    Returns:
        QuestionAnalysis with category, keywords, edge-case flag and sentiment
    """
    return QuestionAnalysis(
        category=resolve_category(question),
        keywords=extract_keywords(question),
        is_edge_case=is_edge_case(question),
        sentiment=detect_sentiment(question),
    )
