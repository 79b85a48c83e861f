from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Keys (both optional: a missing key disables the matching capability)
    openai_api_key: str | None = None
    fred_api_key: str | None = None

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 2091
    debug: bool = False

    # API Configuration
    api_base_url: str = "http://localhost:2091"

    # LLM Configuration
    openai_model: str = "gpt-4-turbo-preview"
    openai_temperature: float = 0.7
    max_tokens: int = 800
    openai_top_p: float = 0.9
    openai_frequency_penalty: float = 0.3
    openai_presence_penalty: float = 0.3
    openai_timeout_seconds: float = 10.0

    # FRED Configuration
    fred_base_url: str = "https://api.stlouisfed.org/fred"
    fred_timeout_seconds: float = 5.0
    fred_bundle_timeout_seconds: float = 6.0

    # Advisor Behaviour
    advisor_trusted_only: bool = False

    # Persistence
    database_url: str = "sqlite:///./mortgagebroker.db"

    # Lead Notifications
    lead_email_to: str = "nikola.spadijer@nafinc.com"
    lead_email_from: str | None = None
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_timeout_seconds: float = 10.0
    lead_log_dir: str = "logs"

    # Handoff and Widget
    application_portal_url: str = (
        "https://apply.newamericanfunding.com/apply/nikola-spadijer/account"
        "?utm_source=mortgagebroker_app&utm_medium=chatgpt&utm_campaign=prequal_flow"
    )
    widget_dir: str = "dist/widget"
    widget_domain: str = "https://mortgagebroker.app"

    # Application Settings
    app_name: str = "MortgageBroker Advisor"
    app_version: str = "0.1.0"

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "json"

    # Feature Flags
    enable_rate_limiting: bool = True
    max_requests_per_minute: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Create a global settings instance
settings = Settings()
