import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEVELOPMENT_ENVS = {"development", "dev"}
MAIL_PROVIDERS = {"smtp", "resend"}


class ConfigurationError(Exception):
    """Raised when mandatory configuration is missing or malformed"""


@dataclass(frozen=True)
class Settings:
    # Database
    database_url: str

    # Mail account identity and credential
    mail_user: str
    mail_password: Optional[str]
    mail_provider: str = "smtp"
    resend_api_key: Optional[str] = None
    mail_from_name: str = "SoftwarePar"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465

    # Operator mailbox that receives contact-form notices
    contact_inbox: str = "softwarepar.lat@gmail.com"

    # Server
    app_env: str = "production"
    port: int = 5000
    log_level: str = "INFO"

    # Frontend
    client_public_dir: str = "client/public"
    dist_dir: str = "dist/public"
    vite_dev_server_url: str = "http://localhost:5173"

    @property
    def is_development(self) -> bool:
        return self.app_env in DEVELOPMENT_ENVS

    @property
    def sender(self) -> str:
        return f'"{self.mail_from_name}" <{self.mail_user}>'


def _int_setting(env: Mapping[str, str], name: str, default: str) -> int:
    raw = env.get(name) or default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Credentials have no fallback values: every missing mandatory variable is
    collected and reported in a single ConfigurationError.
    """
    env = os.environ if environ is None else environ

    mail_provider = (env.get("MAIL_PROVIDER") or "smtp").strip().lower()
    if mail_provider not in MAIL_PROVIDERS:
        raise ConfigurationError(
            f"MAIL_PROVIDER must be one of {sorted(MAIL_PROVIDERS)}, got {mail_provider!r}"
        )

    required = ["DATABASE_URL", "GMAIL_USER"]
    if mail_provider == "smtp":
        required.append("GMAIL_PASS")
    else:
        required.append("RESEND_API_KEY")

    missing = [name for name in required if not (env.get(name) or "").strip()]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return Settings(
        database_url=env["DATABASE_URL"].strip().strip('"'),
        mail_user=env["GMAIL_USER"].strip(),
        mail_password=env.get("GMAIL_PASS"),
        mail_provider=mail_provider,
        resend_api_key=env.get("RESEND_API_KEY"),
        mail_from_name=env.get("MAIL_FROM_NAME", "SoftwarePar"),
        smtp_host=env.get("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=_int_setting(env, "SMTP_PORT", "465"),
        contact_inbox=env.get("CONTACT_INBOX", "softwarepar.lat@gmail.com"),
        app_env=(env.get("APP_ENV") or "production").strip().lower(),
        port=_int_setting(env, "PORT", "5000"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        client_public_dir=env.get("CLIENT_PUBLIC_DIR", "client/public"),
        dist_dir=env.get("DIST_DIR", "dist/public"),
        vite_dev_server_url=env.get("VITE_DEV_SERVER_URL", "http://localhost:5173"),
    )
