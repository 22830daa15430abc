import re
from typing import List, Optional, Tuple

from app.schemas.summarize import SummaryRequest
from app.schemas.share import EmailRequest

TRANSCRIPT_MIN_CHARS = 50
PROMPT_MIN_CHARS = 10

TRANSCRIPT_TOO_SHORT = f"Transcript must be at least {TRANSCRIPT_MIN_CHARS} characters."
PROMPT_TOO_SHORT = f"Prompt must be at least {PROMPT_MIN_CHARS} characters."
INVALID_RECIPIENT = "A valid recipient email address is required."
EMPTY_BODY = "There is no summary to send."

# local@domain.tld, no whitespace, exactly one "@"
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)+$")


def validate_summary_input(
    transcript: Optional[str], prompt: Optional[str]
) -> Tuple[Optional[SummaryRequest], List[str]]:
    """
    Check raw form input against the minimum lengths.
    Returns (request, []) when valid, otherwise (None, messages) with one
    message per failed rule. Lengths are counted on the raw strings.
    """
    transcript = transcript or ""
    prompt = prompt or ""

    errors: List[str] = []
    if len(transcript) < TRANSCRIPT_MIN_CHARS:
        errors.append(TRANSCRIPT_TOO_SHORT)
    if len(prompt) < PROMPT_MIN_CHARS:
        errors.append(PROMPT_TOO_SHORT)

    if errors:
        return None, errors
    return SummaryRequest(transcript=transcript, prompt=prompt), []


def is_valid_email(address: Optional[str]) -> bool:
    if not address:
        return False
    return bool(_EMAIL_RE.match(address.strip()))


def validate_email_input(
    recipient: Optional[str], body: Optional[str]
) -> Tuple[Optional[EmailRequest], List[str]]:
    errors: List[str] = []
    if not is_valid_email(recipient):
        errors.append(INVALID_RECIPIENT)
    if not (body or "").strip():
        errors.append(EMPTY_BODY)

    if errors:
        return None, errors
    return EmailRequest(recipient=recipient.strip(), body=body), []


def join_messages(messages: List[str]) -> str:
    return ", ".join(messages)
