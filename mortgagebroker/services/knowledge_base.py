"""Curated mortgage topic answers, general insights and follow-up prompts"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from mortgagebroker.models.advisor import CuratedAnswer, TopicCategory

_TOPIC_ANSWERS = {
    TopicCategory.CITIZENSHIP: CuratedAnswer(
        summary="You don't need to be a U.S. citizen to get a mortgage. Permanent residents with a green card qualify for conventional, FHA and VA-eligible programs on the same terms as citizens. Non-permanent residents can usually qualify with a valid work visa or EAD and a history of U.S. employment, and some lenders offer ITIN loan programs for borrowers without a Social Security number.",
        highlights=(
            "Green card holders qualify for the same loan programs as citizens",
            "Non-permanent residents typically need a valid visa or EAD",
            "Lenders look for at least 2 years of U.S. employment history",
            "ITIN loan programs exist but usually require larger down payments",
        ),
    ),
    TopicCategory.INCOME_VERIFICATION: CuratedAnswer(
        summary="Lenders verify income to confirm you can repay the loan. For salaried borrowers that usually means recent pay stubs, W-2s from the last two years and a verbal verification of employment shortly before closing. If you haven't filed tax returns recently, talk to a loan officer early: bank statement and asset-based programs can work, but most conventional loans rely on filed returns.",
        highlights=(
            "Pay stubs covering the most recent 30 days",
            "W-2s from the past 2 years",
            "Lenders re-verify employment shortly before closing",
            "Bank statement programs can help when tax returns don't reflect income",
        ),
    ),
    TopicCategory.CREDIT: CuratedAnswer(
        summary="Your credit score is one of the biggest factors in loan approval and pricing. Conventional loans typically need a 620 or higher score, FHA allows scores down to 580 with 3.5% down, and VA loans have no official minimum although most lenders look for 620. Scores of 740 and above generally receive the best rates.",
        highlights=(
            "Conventional loans typically require a 620+ score",
            "FHA allows 580+ with 3.5% down",
            "VA has no official minimum score",
            "740+ usually gets the best pricing",
        ),
    ),
    TopicCategory.DOWNPAYMENT: CuratedAnswer(
        summary="Down payment requirements depend on the loan program. Conventional loans allow as little as 3% down for qualified buyers, FHA requires 3.5%, and VA and USDA loans can offer zero down. Putting 20% down on a conventional loan avoids private mortgage insurance, and gift funds from family are allowed on most programs with a signed gift letter.",
        highlights=(
            "Conventional loans start at 3% down",
            "FHA requires 3.5% down",
            "VA and USDA loans can be zero down",
            "20% down avoids PMI on conventional loans",
            "Gift funds are allowed with a gift letter",
        ),
    ),
    TopicCategory.DOCUMENTS: CuratedAnswer(
        summary="For mortgage pre-approval, you'll typically need: recent pay stubs (last 2 months), W-2 forms from the past 2 years, 2-3 months of bank statements, tax returns if self-employed, and government-issued ID. Lenders use these to verify your income, assets, and employment history.",
        highlights=(
            "Pay stubs from the last 30-60 days showing year-to-date income",
            "W-2 forms or 1099s from the past 2 years",
            "Bank statements for all accounts (2-3 months)",
            "Tax returns if you're self-employed or have rental income",
        ),
    ),
    TopicCategory.PMI: CuratedAnswer(
        summary="To avoid Private Mortgage Insurance (PMI) on a conventional loan, you need to put down at least 20% of the home's purchase price. For example, on a $400,000 home, that's $80,000 down. Alternatively, you can use a piggyback loan or lender-paid MI (which typically means a slightly higher rate).",
        highlights=(
            "20% down payment eliminates PMI on conventional loans",
            "PMI typically costs 0.5-1% of the loan amount annually",
            "FHA loans require mortgage insurance regardless of down payment",
            "PMI can be removed once you reach 20% equity through payments or appreciation",
        ),
    ),
    TopicCategory.DTI: CuratedAnswer(
        summary="Debt-to-Income (DTI) ratio compares your monthly debt payments to your gross monthly income. Most lenders prefer a DTI of 43% or lower, though some programs allow up to 50% with strong compensating factors like high credit score or significant assets.",
        highlights=(
            "Front-end DTI (housing only): typically 28% or less",
            "Back-end DTI (all debts): typically 43% or less",
            "Calculate by dividing total monthly debts by gross monthly income",
            "Lower DTI improves your chances of approval and better rates",
        ),
    ),
    TopicCategory.CLOSING: CuratedAnswer(
        summary="Closing costs typically range from 2-5% of the loan amount. They include: loan origination fees (0.5-1%), appraisal ($300-$600), title search and insurance ($500-$1,500), credit report fees, recording fees, and prepaid items like property taxes and homeowner's insurance.",
        highlights=(
            "Expect 2-5% of the purchase price in closing costs",
            "You'll receive a Loan Estimate within 3 days of applying",
            "Closing Disclosure must be provided 3 business days before closing",
            "Some costs are negotiable or can be covered by the seller",
        ),
    ),
    TopicCategory.RATES: CuratedAnswer(
        summary="Interest rates vary based on credit score, loan type, down payment, and market conditions. Rates can be locked for 30-60 days. A rate lock protects you from rate increases but you won't benefit if rates drop. Better credit scores (740+) typically get the best rates.",
        highlights=(
            "Rates change daily based on market conditions",
            "Credit score heavily impacts your rate (740+ gets best pricing)",
            "Larger down payments often qualify for better rates",
            "Points can be paid to lower your rate (1 point = 1% of loan amount)",
        ),
    ),
    TopicCategory.PREAPPROVAL: CuratedAnswer(
        summary="Pre-approval involves a lender reviewing your finances and credit to determine how much they'll lend you. It's stronger than pre-qualification and shows sellers you're a serious buyer. Pre-approval typically takes 1-3 days and is valid for 60-90 days.",
        highlights=(
            "Pre-approval letters strengthen your offer to sellers",
            "Valid for 60-90 days, but can be updated",
            "Requires credit check and documentation verification",
            "Doesn't guarantee final loan approval (that comes after underwriting)",
        ),
    ),
    TopicCategory.FIRST_TIME: CuratedAnswer(
        summary="First-time homebuyers have more options than they often expect. Conventional programs like HomeReady and Home Possible allow 3% down, FHA loans accept lower credit scores, and many states and cities offer down payment assistance grants or forgivable second loans. Homebuyer education courses are often required for these programs and are worth taking anyway.",
        highlights=(
            "Some conventional programs allow as little as 3% down",
            "FHA loans are flexible on credit scores",
            "State and local down payment assistance is widely available",
            "Homebuyer education is often required for assistance programs",
        ),
    ),
    TopicCategory.SELF_EMPLOYED: CuratedAnswer(
        summary="Self-employed borrowers can absolutely qualify for a mortgage, but income is documented differently. Lenders usually average your net income from the last two years of personal and business tax returns, so write-offs that lower taxable income also lower qualifying income. Bank statement loans are an alternative when tax returns understate what you earn.",
        highlights=(
            "Expect to provide 2 years of personal and business tax returns",
            "Qualifying income is based on net income after deductions",
            "A year-to-date profit and loss statement is often required",
            "Bank statement loans use deposits instead of tax returns",
        ),
    ),
    TopicCategory.CREDIT_ISSUES: CuratedAnswer(
        summary="Past credit events don't rule out homeownership, but they come with waiting periods. FHA typically requires 2 years after a Chapter 7 bankruptcy discharge and 3 years after a foreclosure, while conventional loans generally require 4 and 7 years respectively. Re-establishing on-time payment history and keeping balances low shortens the path back.",
        highlights=(
            "FHA: 2 years after Chapter 7 bankruptcy discharge",
            "FHA: 3 years after foreclosure",
            "Conventional: typically 4 years after bankruptcy and 7 after foreclosure",
            "Rebuilding on-time payment history improves approval odds",
        ),
    ),
    TopicCategory.GENERAL: CuratedAnswer(
        summary="Based on standard mortgage guidelines, lenders evaluate your ability to repay through income verification, credit history, and debt-to-income ratios. Typical requirements include stable employment, adequate income, and manageable debt levels. A licensed loan officer can review your situation and match you with the right program.",
        highlights=(
            "Most lenders require a DTI ratio at or below 43%",
            "Credit score requirements: conventional 620+, FHA 580+",
            "The loan process usually takes 30-45 days from application to closing",
        ),
    ),
}

TOPIC_ANSWERS: Mapping[TopicCategory, CuratedAnswer] = MappingProxyType(_TOPIC_ANSWERS)

GENERAL_INSIGHTS: tuple[str, ...] = (
    "Most lenders require a debt-to-income (DTI) ratio at or below 43%. Strong compensating factors can support approvals up to 50%.",
    "To avoid PMI on conventional loans, you typically need a down payment of at least 20% of the home's purchase price.",
    "Common closing costs include origination fees (0.5-1% of loan), appraisal ($300-500), title insurance, and escrow deposits.",
    "Pre-approval typically requires: recent pay stubs, W-2s from the last 2 years, bank statements (2-3 months), and credit authorization.",
    "Interest rate locks are typically good for 30-60 days. Extended locks are available but cost more.",
    "The loan application process usually takes 30-45 days from application to closing.",
    "Conventional loans follow Fannie Mae/Freddie Mac limits ($766,550 for 2024 in most areas). FHA and VA have different limits.",
    "First-time buyers may qualify for programs with as little as 3% down payment.",
    "Credit score requirements: Conventional loans typically need 620+, FHA allows 580+, VA has no minimum.",
)

GENERIC_FOLLOW_UPS: tuple[str, ...] = (
    "Would you like to calculate your estimated monthly payment?",
    "What are current mortgage rates?",
    "Ready to discuss the pre-qualification process?",
)

_FOLLOW_UPS = {
    TopicCategory.CITIZENSHIP: (
        "What documents will I need?",
        "How much do I need for a down payment?",
        "Ready to discuss the pre-qualification process?",
    ),
    TopicCategory.INCOME_VERIFICATION: (
        "What documents will I need?",
        "How is my debt-to-income ratio calculated?",
    ),
    TopicCategory.CREDIT: (
        "What credit issues can delay approval?",
        "What are current mortgage rates?",
        "Ready to discuss the pre-qualification process?",
    ),
    TopicCategory.DOWNPAYMENT: (
        "How do I avoid PMI?",
        "Are there first-time homebuyer programs?",
        "Would you like to calculate your estimated monthly payment?",
    ),
    TopicCategory.DOCUMENTS: (
        "How long does pre-approval take?",
        "What are typical closing costs?",
        "Ready to discuss the pre-qualification process?",
    ),
    TopicCategory.PMI: (
        "How much do I need for a down payment?",
        "Would you like to calculate your estimated monthly payment?",
    ),
    TopicCategory.DTI: (
        "What documents will I need?",
        "Would you like to calculate your estimated monthly payment?",
        "Ready to discuss the pre-qualification process?",
    ),
    TopicCategory.CLOSING: (
        "Can the seller cover closing costs?",
        "Would you like to calculate your estimated monthly payment?",
    ),
    TopicCategory.RATES: (
        "How does my credit score affect my rate?",
        "Would you like to calculate your estimated monthly payment?",
        "Ready to discuss the pre-qualification process?",
    ),
    TopicCategory.PREAPPROVAL: (
        "What documents will I need?",
        "How is my debt-to-income ratio calculated?",
        "Ready to start your pre-qualification?",
    ),
    TopicCategory.FIRST_TIME: (
        "How much do I need for a down payment?",
        "What documents will I need?",
        "Ready to discuss the pre-qualification process?",
    ),
    TopicCategory.SELF_EMPLOYED: (
        "What documents will I need?",
        "How is my debt-to-income ratio calculated?",
    ),
    TopicCategory.CREDIT_ISSUES: (
        "What credit score do I need?",
        "Ready to discuss the pre-qualification process?",
    ),
}

FOLLOW_UPS: Mapping[TopicCategory, tuple[str, ...]] = MappingProxyType(_FOLLOW_UPS)

MAX_FOLLOW_UPS = 3


class TopicKnowledgeBase:
    """Read-only lookups over the curated topic tables"""

    def __init__(
        self,
        answers: Mapping[TopicCategory, CuratedAnswer] = TOPIC_ANSWERS,
        insights: tuple[str, ...] = GENERAL_INSIGHTS,
        follow_ups: Mapping[TopicCategory, tuple[str, ...]] = FOLLOW_UPS,
    ):
        self._answers = answers
        self._insights = insights
        self._follow_ups = follow_ups

    def lookup(self, category: TopicCategory) -> CuratedAnswer | None:
        return self._answers.get(category)

    def general(self) -> CuratedAnswer:
        """The GENERAL entry, which always exists."""
        return self._answers[TopicCategory.GENERAL]

    def relevant_insights(self, keywords: Iterable[str], limit: int = 3) -> list[str]:
        """General insights mentioning any of the given keywords, in table order."""
        keywords = [keyword.lower() for keyword in keywords]
        matches = [
            insight
            for insight in self._insights
            if any(keyword in insight.lower() for keyword in keywords)
        ]
        return matches[:limit]

    def follow_ups(self, category: TopicCategory) -> list[str]:
        """Category follow-ups (generic trio when none are declared), capped at three."""
        suggestions = self._follow_ups.get(category) or GENERIC_FOLLOW_UPS
        unique = list(dict.fromkeys(suggestions))
        return unique[:MAX_FOLLOW_UPS]
