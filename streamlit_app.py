# Configuration
from typing import Any, Dict, Optional

import requests
import streamlit as st

from mortgagebroker.config import settings

# Use configured API base URL
API_BASE_URL = settings.api_base_url

PURPOSE_OPTIONS = {
    "Purchase": "purchase",
    "Rate/Term Refinance": "refinance",
    "Cash-out Refinance": "cashout",
    "Second Home": "secondhome",
    "Investment Property": "investment",
}

OCCUPANCY_OPTIONS = {
    "Primary Residence": "primary",
    "Second Home": "secondhome",
    "Investment": "investment",
}

PROPERTY_TYPE_OPTIONS = {
    "Single Family": "singlefamily",
    "Condo": "condo",
    "Townhome": "townhome",
    "2-4 Unit": "multiunit",
}

STEPS = ["advisor", "calculator", "purpose", "contact", "handoff"]

# Page configuration
st.set_page_config(
    page_title=settings.app_name,
    page_icon="🏠",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better styling
st.markdown(
    """
<style>
    .main-header {
        text-align: center;
        color: #081827;
        font-size: 2.5rem;
        margin-bottom: 2rem;
    }

    .answer-card {
        background-color: #F1F8E9;
        padding: 1.5rem;
        border-radius: 10px;
        border-left: 5px solid #6CE3CF;
        margin: 1rem 0;
        color: #333;
    }

    .source-card {
        background-color: white;
        padding: 0.75rem;
        border-radius: 8px;
        margin: 0.25rem 0;
        box-shadow: 0 2px 4px rgba(0, 0, 0, 0.1);
        color: #333;
        font-size: 0.9rem;
    }
</style>
""",
    unsafe_allow_html=True,
)


def initialize_session_state():
    """Initialize session state variables"""
    if "step" not in st.session_state:
        st.session_state.step = "advisor"
    if "answer" not in st.session_state:
        st.session_state.answer = None
    if "calculator" not in st.session_state:
        st.session_state.calculator = None
    if "intake" not in st.session_state:
        st.session_state.intake = None
    if "api_connected" not in st.session_state:
        st.session_state.api_connected = False


def check_api_health() -> bool:
    """Check if the API is healthy"""
    try:
        response = requests.get(f"{API_BASE_URL}/health", timeout=5)
        return response.status_code == 200 and response.json().get("status") == "ok"
    except requests.exceptions.RequestException:
        return False


def call_tool(name: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Call a tool endpoint and return its structured content"""
    try:
        response = requests.post(
            f"{API_BASE_URL}/tools/{name}",
            json=payload or {},
            headers={"Content-Type": "application/json"},
            timeout=30,
        )
        response.raise_for_status()
        return response.json().get("structuredContent", {})
    except requests.exceptions.RequestException as e:
        st.error(f"Error communicating with API: {str(e)}")
        return {}


def go_to(step: str):
    st.session_state.step = step
    st.rerun()


def display_answer(answer: Dict[str, Any]):
    """Display an advisor answer with highlights, sources and follow-ups"""
    st.markdown(
        f'<div class="answer-card">{answer["summary"]}</div>', unsafe_allow_html=True
    )

    if answer.get("highlights"):
        st.markdown("#### Key points")
        for highlight in answer["highlights"]:
            st.markdown(f"- {highlight}")

    if answer.get("sources"):
        with st.expander("Sources"):
            for source in answer["sources"]:
                st.markdown(
                    f'<div class="source-card"><strong>{source["title"]}</strong>: {source["snippet"]}</div>',
                    unsafe_allow_html=True,
                )

    if answer.get("followUps"):
        st.markdown("#### You might also ask")
        for index, follow_up in enumerate(answer["followUps"]):
            if st.button(follow_up, key=f"follow_up_{index}"):
                ask_question(follow_up)


def ask_question(question: str):
    with st.spinner("Reviewing knowledge base..."):
        result = call_tool("mortgageAdvisor", {"question": question})
    if result:
        st.session_state.answer = result.get("answer")
        st.rerun()


def advisor_step():
    st.markdown("### 💬 Ask the mortgage advisor")
    col1, col2 = st.columns([4, 1])

    with col1:
        question = st.text_input(
            "Your question:",
            key="question_input",
            placeholder="What documents do I need for pre-approval?",
        )

    with col2:
        ask_button = st.button("Ask", type="primary")

    if ask_button and question:
        ask_question(question)

    if st.session_state.answer:
        display_answer(st.session_state.answer)

    st.markdown("---")
    if st.button("🧮 Estimate my payment", type="secondary"):
        go_to("calculator")


def calculator_step():
    st.markdown("### 🧮 Payment calculator")
    col1, col2, col3 = st.columns(3)

    with col1:
        loan_amount = st.number_input(
            "Loan amount ($)", min_value=50000, value=400000, step=5000
        )
    with col2:
        rate = st.number_input(
            "Interest rate (%)", min_value=0.01, max_value=20.0, value=6.5, step=0.125
        )
    with col3:
        term_years = st.selectbox("Term (years)", [30, 20, 15, 10])

    if st.button("Calculate", type="primary"):
        result = call_tool(
            "mortgageCalculator",
            {"loanAmount": loan_amount, "rate": rate, "termYears": term_years},
        )
        if result:
            st.session_state.calculator = result.get("calculator")

    calculator = st.session_state.calculator
    if calculator:
        metric1, metric2, metric3 = st.columns(3)
        metric1.metric("Monthly payment", f"${calculator['monthlyPayment']:,.2f}")
        metric2.metric("Total interest", f"${calculator['totalInterest']:,.0f}")
        metric3.metric("Payoff", f"{calculator['payoffDateMonths']} months")

    st.markdown("---")
    back, forward = st.columns(2)
    with back:
        if st.button("⬅️ Back to advisor"):
            go_to("advisor")
    with forward:
        if st.button("Continue ➡️", type="primary"):
            go_to("purpose")


def purpose_step():
    st.markdown("### 🏡 Tell us about the loan")
    purpose = st.selectbox("Loan purpose", list(PURPOSE_OPTIONS))
    occupancy = st.selectbox("Occupancy", list(OCCUPANCY_OPTIONS))
    property_type = st.selectbox("Property type", list(PROPERTY_TYPE_OPTIONS))
    est_price = st.number_input("Estimated price ($)", min_value=0, value=0, step=5000)
    est_down_payment = st.number_input(
        "Estimated down payment ($)", min_value=0, value=0, step=1000
    )

    if st.button("Save and continue", type="primary"):
        intake = {
            "purpose": PURPOSE_OPTIONS[purpose],
            "occupancy": OCCUPANCY_OPTIONS[occupancy],
            "propertyType": PROPERTY_TYPE_OPTIONS[property_type],
        }
        if est_price:
            intake["estPrice"] = int(est_price)
        if est_down_payment:
            intake["estDownPayment"] = int(est_down_payment)

        if call_tool("saveIntake", intake):
            st.session_state.intake = intake
            go_to("contact")


def contact_step():
    st.markdown("### 📇 How can a loan officer reach you?")
    full_name = st.text_input("Full name")
    email = st.text_input("Email")
    phone = st.text_input("Phone")
    consent = st.checkbox(
        "I agree to be contacted by MortgageBroker and New American Funding via "
        "calls, emails, and texts (including autodialer and prerecorded messages)."
    )

    if st.button("Submit", type="primary"):
        if not consent:
            st.warning("Please provide consent so a loan officer can contact you.")
            return

        result = call_tool(
            "submitLead",
            {
                "fullName": full_name,
                "email": email,
                "phone": phone,
                "consent": consent,
                "intake": st.session_state.intake,
            },
        )
        if result:
            go_to("handoff")


def handoff_step():
    st.success("✅ You're all set!")
    result = call_tool("startPrequalSession")
    if result:
        st.link_button(result.get("label", "Continue"), result["url"], type="primary")

    if st.button("🔄 Start over", type="secondary"):
        for key in ("answer", "calculator", "intake"):
            st.session_state[key] = None
        go_to("advisor")


def main():
    """Main application function"""
    initialize_session_state()

    # Header
    st.markdown(
        '<h1 class="main-header">🏠 MortgageBroker Advisor</h1>', unsafe_allow_html=True
    )
    st.markdown("---")

    # Sidebar
    with st.sidebar:
        st.markdown("### 🛠️ Controls")

        # API Status
        if st.button("🔄 Check API Status"):
            st.session_state.api_connected = check_api_health()

        if st.session_state.api_connected:
            st.success("✅ API Connected")
        else:
            st.error("❌ API Disconnected")

        st.markdown("---")
        st.progress((STEPS.index(st.session_state.step) + 1) / len(STEPS))
        st.caption(f"Step: {st.session_state.step}")

        st.markdown("---")

        # Information
        st.markdown("### ℹ️ About")
        st.markdown(
            """
        Ask mortgage questions, estimate your payment, and hand off to a secure
        application portal.

        **Answers come from:**
        - Live FRED economic data
        - Curated mortgage guidelines
        - A mortgage-only AI assistant

        NMLS #2459410 · Equal Housing Lender
        """
        )

    # Check API connection on load
    if not st.session_state.api_connected:
        st.session_state.api_connected = check_api_health()

    if not st.session_state.api_connected:
        st.error(
            f"🚨 Cannot connect to the API. Please make sure the FastAPI server is running on {API_BASE_URL}"
        )
        st.info(
            f"Start the server with: `uvicorn mortgagebroker.main:app --host {settings.host} --port {settings.port}`"
        )
        return

    match st.session_state.step:
        case "calculator":
            calculator_step()
        case "purpose":
            purpose_step()
        case "contact":
            contact_step()
        case "handoff":
            handoff_step()
        case _:
            advisor_step()


if __name__ == "__main__":
    main()
