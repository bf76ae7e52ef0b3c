"""
Centralized configuration with environment variable overrides.

Business branding, collaborator credentials, onboarding policy and
server settings are configurable here. Nothing is hardcoded in tool
or onboarding logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from src.logging_context import install_correlation_filter

load_dotenv()

logger = logging.getLogger(__name__)

RECONFIRM_POLICIES = ("reprovision", "ignore", "reject")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Branding used in customer-facing messages."""

    name: str = os.getenv("BUSINESS_NAME", "Green Glow Gardens")
    assistant_name: str = os.getenv("ASSISTANT_NAME", "Jane")
    owner_phone: str = os.getenv("OWNER_PHONE", "")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "America/New_York")


@dataclass(frozen=True)
class TwilioConfig:
    """SMS delivery credentials."""

    account_sid: str = os.getenv("TWILIO_ACCOUNT_SID", "")
    auth_token: str = os.getenv("TWILIO_AUTH_TOKEN", "")
    from_number: str = os.getenv("TWILIO_FROM_NUMBER", "+18557442080")


@dataclass(frozen=True)
class GoogleConfig:
    """Google OAuth client and calendar settings."""

    client_id: str = os.getenv("GOOGLE_CLIENT_ID", "")
    client_secret: str = os.getenv("GOOGLE_CLIENT_SECRET", "")
    redirect_uri: str = os.getenv(
        "GOOGLE_REDIRECT_URI", "http://localhost:3000/oauth2callback"
    )
    token_path: str = os.getenv("GOOGLE_TOKEN_PATH", "token.json")
    calendar_id: str = os.getenv("GOOGLE_CALENDAR_ID", "primary")
    scopes: tuple[str, ...] = ("https://www.googleapis.com/auth/calendar",)


@dataclass(frozen=True)
class VapiConfig:
    """Workflow provisioning API and assistant voice settings."""

    api_key: str = os.getenv("VAPI_API_KEY", "")
    api_base: str = os.getenv("VAPI_API_BASE", "https://api.vapi.ai")
    sms_tool_id: str = os.getenv("VAPI_SMS_TOOL_ID", "ea06a31a-6291-4dd7-bc46-8b1ebd79875d")
    model: str = os.getenv("VAPI_MODEL", "gpt-4o")
    model_provider: str = os.getenv("VAPI_MODEL_PROVIDER", "openai")
    temperature: float = _safe_float("VAPI_TEMPERATURE", "0.7")
    max_tokens: int = _safe_int("VAPI_MAX_TOKENS", "1000")
    voice_id: str = os.getenv("VAPI_VOICE_ID", "Kylie")
    voice_provider: str = os.getenv("VAPI_VOICE_PROVIDER", "vapi")


@dataclass(frozen=True)
class OnboardingConfig:
    """Client onboarding storage and policy."""

    clients_db_path: str = os.getenv("CLIENTS_DB_PATH", "clients.json")
    summaries_path: str = os.getenv("CALL_SUMMARIES_PATH", "call_summaries.json")
    payment_link_template: str = os.getenv(
        "PAYMENT_LINK_TEMPLATE", "https://checkout.stripe.com/pay/mock-{client_id}"
    )
    reconfirm_policy: str = os.getenv("RECONFIRM_POLICY", "reprovision")
    collaborator_timeout_sec: float = _safe_float("COLLABORATOR_TIMEOUT_SEC", "15.0")
    store_max_retries: int = _safe_int("STORE_MAX_RETRIES", "3")
    phone_area_code: str = os.getenv("PHONE_AREA_CODE", "855")


@dataclass(frozen=True)
class ServerConfig:
    """HTTP listener settings."""

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _safe_int("PORT", "3000")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    twilio: TwilioConfig = field(default_factory=TwilioConfig)
    google: GoogleConfig = field(default_factory=GoogleConfig)
    vapi: VapiConfig = field(default_factory=VapiConfig)
    onboarding: OnboardingConfig = field(default_factory=OnboardingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.onboarding.reconfirm_policy not in RECONFIRM_POLICIES:
        raise ValueError(
            f"RECONFIRM_POLICY must be one of {', '.join(RECONFIRM_POLICIES)}, "
            f"got {config.onboarding.reconfirm_policy!r}"
        )
    if config.onboarding.collaborator_timeout_sec <= 0:
        raise ValueError(
            "COLLABORATOR_TIMEOUT_SEC must be > 0, "
            f"got {config.onboarding.collaborator_timeout_sec}"
        )
    if config.onboarding.store_max_retries < 1:
        raise ValueError(
            f"STORE_MAX_RETRIES must be >= 1, got {config.onboarding.store_max_retries}"
        )
    if "{client_id}" not in config.onboarding.payment_link_template:
        raise ValueError("PAYMENT_LINK_TEMPLATE must contain a {client_id} placeholder")
    area = config.onboarding.phone_area_code
    if not (len(area) == 3 and area.isdigit()):
        raise ValueError(f"PHONE_AREA_CODE must be three digits, got {area!r}")
    if not 0.0 <= config.vapi.temperature <= 2.0:
        raise ValueError(
            f"VAPI_TEMPERATURE must be between 0.0 and 2.0, got {config.vapi.temperature}"
        )
    if config.vapi.max_tokens < 1:
        raise ValueError(f"VAPI_MAX_TOKENS must be >= 1, got {config.vapi.max_tokens}")
    if not 0 < config.server.port < 65536:
        raise ValueError(f"PORT must be between 1 and 65535, got {config.server.port}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] [%(correlation_id)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_correlation_filter()
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
