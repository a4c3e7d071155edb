"""Runtime configuration for the review console."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from kyc_review.core.utils import get_config_value, load_env_file

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/kyc_review.env")
DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TOKEN_FILE = Path("~/.kyc_review/session.json")
DEFAULT_NOTIFICATION_TTL = 5.0
DEFAULT_REQUEST_TIMEOUT = 15.0


@dataclass(frozen=True)
class ReviewSettings:
    """Settings resolved from Streamlit secrets, the environment, or an env file."""

    api_base_url: str = DEFAULT_BASE_URL
    token_file: Path = DEFAULT_TOKEN_FILE
    notification_ttl: float = DEFAULT_NOTIFICATION_TTL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    admin_username: str = ""
    admin_password: str = field(default="", repr=False)


def _float_setting(key: str, default: float) -> float:
    raw = get_config_value(key, "")
    if not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r; expected a number, using %s", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r; expected a positive number, using %s", key, raw, default)
        return default
    return value


def load_settings(env_file: Optional[Path] = None) -> ReviewSettings:
    """Resolve settings, pre-loading ``env_file`` (or ``KYC_REVIEW_ENV_FILE``) first."""

    env_path = env_file or Path(os.getenv("KYC_REVIEW_ENV_FILE", DEFAULT_ENV_FILE))
    load_env_file(env_path)

    base_url = get_config_value("KYC_API_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL
    token_file = get_config_value("KYC_TOKEN_FILE", "").strip()

    return ReviewSettings(
        api_base_url=base_url.rstrip("/"),
        token_file=Path(token_file).expanduser() if token_file else DEFAULT_TOKEN_FILE.expanduser(),
        notification_ttl=_float_setting("KYC_NOTIFICATION_TTL", DEFAULT_NOTIFICATION_TTL),
        request_timeout=_float_setting("KYC_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        admin_username=get_config_value("KYC_ADMIN_USERNAME", ""),
        admin_password=get_config_value("KYC_ADMIN_PASSWORD", ""),
    )
