import time
from functools import lru_cache
from urllib.parse import urlsplit

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from mortgagebroker.config import settings
from mortgagebroker.middleware.rate_limiter import apply_rate_limiting
from mortgagebroker.models.database import (
    create_database_engine,
    create_tables,
    get_session_maker,
)
from mortgagebroker.models.tools import (
    CalculatorRequest,
    FunnelStep,
    HealthResponse,
    IntakeRequest,
    LeadRequest,
    MortgageAdvisorRequest,
    ToolDescriptor,
    ToolResponse,
)
from mortgagebroker.services.advisor_service import (
    AdvisorService,
    build_advisor_service,
    clean_question,
)
from mortgagebroker.services.database_service import LeadService
from mortgagebroker.services.mortgage_service import MortgageCalculationService
from mortgagebroker.services.notification_service import LeadNotificationService
from mortgagebroker.utils.logger import configure_logging, get_logger, log_api_request
from mortgagebroker.utils.widget import (
    WIDGET_MIME_TYPE,
    WIDGET_URI,
    load_widget_template,
    widget_meta,
)

# Configure structured logging
configure_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = get_logger(__name__)

TOOL_DESCRIPTORS = [
    ToolDescriptor(
        name="mortgageAdvisor",
        title="Mortgage knowledge advisor",
        description="Answers mortgage questions using live FRED data, the curated knowledge base and a guarded AI fallback.",
        invoking="Reviewing knowledge base",
        invoked="Shared guidance",
    ),
    ToolDescriptor(
        name="mortgageCalculator",
        title="Mortgage payment calculator",
        description="Estimates monthly payment, interest, and payoff timeline.",
        invoking="Crunching numbers",
        invoked="Shared payment estimate",
    ),
    ToolDescriptor(
        name="submitLead",
        title="Capture lead",
        description="Stores a GDPR/CCPA safe marketing lead with explicit consent.",
        invoking="Collecting lead",
        invoked="Lead collected",
    ),
    ToolDescriptor(
        name="saveIntake",
        title="Save mortgage intake",
        description="Persists the borrower's program preferences before the secure handoff.",
        invoking="Saving intake",
        invoked="Intake saved",
    ),
    ToolDescriptor(
        name="startPrequalSession",
        title="Start prequalification",
        description="Returns the secure application portal URL with attribution parameters.",
        invoking="Preparing handoff",
        invoked="Handoff ready",
    ),
]

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Tool server for the MortgageBroker advisor widget and lead funnel",
    version=settings.app_version,
    debug=settings.debug,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Mcp-Session-Id"],
)

# Apply rate limiting
limiter = apply_rate_limiting(app)
TOOL_RATE_LIMIT = f"{settings.max_requests_per_minute}/minute"

# Database setup
engine = create_database_engine(settings.database_url)
SessionLocal = get_session_maker(engine)


def get_database_session() -> Session:
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_lead_service(db: Session = Depends(get_database_session)) -> LeadService:
    """Dependency to get lead service instance"""
    return LeadService(db)


@lru_cache
def get_advisor_service() -> AdvisorService:
    """Dependency to get the advisor pipeline, built once per process"""
    return build_advisor_service(settings)


@lru_cache
def get_notification_service() -> LeadNotificationService:
    """Dependency to get the lead notification service"""
    return LeadNotificationService(settings)


@app.on_event("startup")
async def startup_event():
    """Startup event handler"""
    logger.info(
        "Application starting", app_name=settings.app_name, debug=settings.debug
    )

    # Create database tables
    try:
        create_tables(engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error("Failed to create database tables", error=str(e))
        raise

    if not settings.fred_api_key:
        logger.warning(
            "FRED API key not configured, live indicator data disabled",
            help="Please set FRED_API_KEY environment variable",
        )
    if not settings.openai_api_key:
        logger.warning(
            "OpenAI API key not configured, generative fallback disabled",
            help="Please set OPENAI_API_KEY environment variable",
        )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="ok")


@app.get("/tools", response_model=list[ToolDescriptor])
async def list_tools():
    """Describe the callable tools and their status messages"""
    return TOOL_DESCRIPTORS


@app.get("/widget")
async def widget_resource():
    """Embeddable widget resource for the host agent"""
    try:
        html = load_widget_template(settings.widget_dir)
    except FileNotFoundError as e:
        logger.error("Widget bundle unavailable", error=str(e))
        raise HTTPException(status_code=503, detail=str(e)) from e

    portal = urlsplit(settings.application_portal_url)
    return {
        "contents": [
            {
                "uri": WIDGET_URI,
                "mimeType": WIDGET_MIME_TYPE,
                "text": html,
                "_meta": widget_meta(
                    settings.widget_domain, f"{portal.scheme}://{portal.netloc}"
                ),
            }
        ]
    }


@app.post("/tools/mortgageAdvisor", response_model=ToolResponse)
@limiter.limit(TOOL_RATE_LIMIT)
async def mortgage_advisor(
    request: Request,
    advisor_request: MortgageAdvisorRequest,
    advisor_service: AdvisorService = Depends(get_advisor_service),
):
    """
    Answer a mortgage question.

    The advisor pipeline never fails: live indicator data, curated topics, the
    guarded AI fallback and general guidance are tried in that order.
    """
    start_time = time.time()
    question = clean_question(advisor_request.question)
    api_logger = log_api_request(
        method="POST",
        path="/tools/mortgageAdvisor",
        user_agent=request.headers.get("user-agent", ""),
        content_length=len(question),
    )
    api_logger.info("Processing advisor question", question_preview=question[:50])

    answer = await advisor_service.answer(question)

    api_logger.info(
        "Advisor question answered",
        duration_ms=(time.time() - start_time) * 1000,
        summary_length=len(answer.summary),
    )
    return ToolResponse.text(
        answer.summary,
        step=FunnelStep.ADVISOR.value,
        answer=answer.model_dump(mode="json", by_alias=True),
    )


@app.post("/tools/mortgageCalculator", response_model=ToolResponse)
@limiter.limit(TOOL_RATE_LIMIT)
async def mortgage_calculator(request: Request, calculator_request: CalculatorRequest):
    """Estimate a monthly payment for a fixed-rate loan"""
    result = MortgageCalculationService.estimate(
        calculator_request.loan_amount,
        calculator_request.rate,
        calculator_request.term_years,
    )
    description = MortgageCalculationService.describe(
        result, calculator_request.rate, calculator_request.term_years
    )
    return ToolResponse.text(
        description,
        step=FunnelStep.ADVISOR.value,
        calculator=result.model_dump(mode="json", by_alias=True),
    )


@app.post("/tools/saveIntake", response_model=ToolResponse)
@limiter.limit(TOOL_RATE_LIMIT)
async def save_intake(
    request: Request,
    intake_request: IntakeRequest,
    lead_service: LeadService = Depends(get_lead_service),
):
    """Persist the borrower's program preferences before the handoff"""
    api_logger = log_api_request(method="POST", path="/tools/saveIntake")

    try:
        lead_service.create_intake(intake_request)
    except Exception as e:
        api_logger.error("Error saving intake", error=str(e), status_code=500)
        raise HTTPException(
            status_code=500, detail=f"Error saving intake: {str(e)}"
        ) from e

    return ToolResponse.text(
        "Intake saved; ready for secure handoff.", step=FunnelStep.HANDOFF.value
    )


@app.post("/tools/submitLead", response_model=ToolResponse)
@limiter.limit(TOOL_RATE_LIMIT)
async def submit_lead(
    request: Request,
    lead_request: LeadRequest,
    lead_service: LeadService = Depends(get_lead_service),
    notifier: LeadNotificationService = Depends(get_notification_service),
):
    """Capture a consented lead, its optional intake, and notify the broker"""
    api_logger = log_api_request(
        method="POST",
        path="/tools/submitLead",
        has_intake=lead_request.intake is not None,
    )

    try:
        lead = lead_service.create_lead(lead_request)
    except Exception as e:
        api_logger.error("Error saving lead", error=str(e), status_code=500)
        raise HTTPException(
            status_code=500, detail=f"Error saving lead: {str(e)}"
        ) from e

    record = lead.to_record()
    try:
        await run_in_threadpool(notifier.notify, record, lead_request.intake)
    except Exception as e:
        # The lead is already stored; notification problems stay server-side
        api_logger.error("Lead notification failed", error=str(e))

    api_logger.info("Lead captured", lead_id=lead.id)
    return ToolResponse.text(
        f"Lead saved for {record.full_name}.", step=FunnelStep.HANDOFF.value
    )


@app.post("/tools/startPrequalSession", response_model=ToolResponse)
@limiter.limit(TOOL_RATE_LIMIT)
async def start_prequal_session(request: Request):
    """Return the secure application portal URL"""
    return ToolResponse.text(
        "Launching secure application portal.",
        url=settings.application_portal_url,
        label="Continue / Create Account",
    )


@app.get("/")
async def root():
    """Root endpoint with basic information"""
    return {
        "message": "MortgageBroker tool server",
        "endpoints": {
            "tools": "/tools",
            "widget": "/widget",
            "health": "/health",
            "docs": "/docs",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
