import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_EMAILJS_API_URL = "https://api.emailjs.com/api/v1.0/email/send"
DEFAULT_PROMPT = "Summarize in bullet points for executives."


def _float_env(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _int_env(name: str, default: str) -> int:
    return int(os.getenv(name, default))


@dataclass(frozen=True)
class SummarizerConfig:
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    deployment: Optional[str] = None
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "SummarizerConfig":
        return cls(
            api_key=os.getenv("AZURE_OPENAI_API_KEY"),
            base_url=os.getenv("AZURE_OPENAI_BASE_URL"),
            deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT"),
            timeout_seconds=_float_env("SUMMARIZER_TIMEOUT_SECONDS", "60"),
        )


@dataclass(frozen=True)
class EmailJsConfig:
    """Settings for the EmailJS REST API.

    All four identifiers are required before a share is attempted. The
    server authenticates with both the public key (``user_id``) and the
    private key (``accessToken``).
    """

    service_id: Optional[str] = None
    template_id: Optional[str] = None
    public_key: Optional[str] = None
    private_key: Optional[str] = None
    api_url: str = DEFAULT_EMAILJS_API_URL
    from_name: str = "SummarizeShare"
    subject: str = "Your Meeting Summary"
    timeout_seconds: float = 15.0

    @classmethod
    def from_env(cls) -> "EmailJsConfig":
        return cls(
            service_id=os.getenv("EMAILJS_SERVICE_ID"),
            template_id=os.getenv("EMAILJS_TEMPLATE_ID"),
            public_key=os.getenv("EMAILJS_PUBLIC_KEY"),
            private_key=os.getenv("EMAILJS_PRIVATE_KEY"),
            api_url=os.getenv("EMAILJS_API_URL", DEFAULT_EMAILJS_API_URL),
            timeout_seconds=_float_env("EMAILJS_TIMEOUT_SECONDS", "15"),
        )

    def missing_settings(self) -> List[str]:
        """Env var names of required settings that are empty, in a fixed order."""
        required = [
            ("EMAILJS_SERVICE_ID", self.service_id),
            ("EMAILJS_TEMPLATE_ID", self.template_id),
            ("EMAILJS_PUBLIC_KEY", self.public_key),
            ("EMAILJS_PRIVATE_KEY", self.private_key),
        ]
        return [name for name, value in required if not (value or "").strip()]


@dataclass(frozen=True)
class UploadLimits:
    max_upload_mb: int = 5
    max_pdf_pages: int = 20

    @classmethod
    def from_env(cls) -> "UploadLimits":
        return cls(
            max_upload_mb=_int_env("MAX_UPLOAD_MB", "5"),
            max_pdf_pages=_int_env("MAX_PDF_PAGES", "20"),
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
