# config.py
import os
import base64
import binascii
import logging
from typing import Mapping, NamedTuple, Optional

logger = logging.getLogger(__name__)

SPREADSHEET_ID_VAR = "GOOGLE_SPREADSHEET_ID"
SERVICE_ACCOUNT_EMAIL_VAR = "GOOGLE_SERVICE_ACCOUNT_EMAIL"
PRIVATE_KEY_VAR = "GOOGLE_PRIVATE_KEY"


class Settings:
    """
    Central place for environment-configured settings.
    Google credentials are not here; see load_google_credentials().
    """

    PORT: int = int(os.getenv("PORT", "3000"))

    # Browser origin allowed to call the API
    CORS_ORIGIN: str = os.getenv("CORS_ORIGIN", "http://localhost:3005")

    # 3600 seconds = 1 hour. After that the data is re-read from the sheet.
    TRANSLATIONS_CACHE_TTL: int = int(os.getenv("TRANSLATIONS_CACHE_TTL", "3600"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


class ConfigurationError(RuntimeError):
    pass


class GoogleCredentials(NamedTuple):
    spreadsheet_id: str
    client_email: str
    private_key: str


def _decode_private_key(raw: Optional[str]) -> str:
    """Decode a base64-encoded PEM key. Returns "" if it can't be decoded."""
    if not raw:
        return ""
    try:
        # `base64 key.pem` wraps its output at 76 columns
        key = base64.b64decode("".join(raw.split()), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return ""
    # Some platforms store the PEM with escaped newlines before encoding it
    return key.replace("\\n", "\n").replace("\r\n", "\n")


def _fail(message: str):
    logger.error(message)
    raise ConfigurationError(f"Configuration error: {message}")


def load_google_credentials(environ: Mapping[str, str] = os.environ) -> GoogleCredentials:
    """
    Read the spreadsheet id, service account email and private key.

    Raises ConfigurationError if any of them is missing, so the service
    depending on them is never constructed.
    """
    spreadsheet_id = environ.get(SPREADSHEET_ID_VAR)
    client_email = environ.get(SERVICE_ACCOUNT_EMAIL_VAR)
    private_key = _decode_private_key(environ.get(PRIVATE_KEY_VAR))

    if not spreadsheet_id:
        _fail(f"{SPREADSHEET_ID_VAR} is not defined in environment variables.")
    if not client_email:
        _fail(f"{SERVICE_ACCOUNT_EMAIL_VAR} is not defined in environment variables.")
    if not private_key:
        _fail(
            f"{PRIVATE_KEY_VAR} is not defined or could not be processed. "
            "Make sure it's set to the base64-encoded key in .env."
        )

    logger.info("Google Sheet API configuration loaded successfully.")
    return GoogleCredentials(spreadsheet_id, client_email, private_key)
