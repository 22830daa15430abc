from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import EmailJsConfig
from app.core.errors import ConfigurationError, ProviderError, ValidationError
from app.core.logging import new_request_id
from app.schemas.share import EmailFailure, EmailRequest, EmailResult, EmailSuccess
from app.services.submissions import SubmissionTracker
from app.services.validators import join_messages, validate_email_input

logger = logging.getLogger(__name__)


class ShareWorkflow:
    """
    Send a generated summary to one recipient through the EmailJS REST API.

    Configuration and input are checked before anything goes on the wire;
    when they fail no HTTP request is made. Exactly one POST otherwise,
    never retried.
    """

    def __init__(self, config: EmailJsConfig, client: Optional[httpx.Client] = None):
        self.config = config
        # A client passed in belongs to the caller and is left open.
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.timeout_seconds)
        self.tracker = SubmissionTracker()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ShareWorkflow":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def submit(self, recipient: Optional[str], body: Optional[str], request_id: Optional[str] = None) -> EmailResult:
        """Build an EmailRequest from raw input and share it."""
        req, errors = validate_email_input(recipient, body)
        if req is None:
            # Missing configuration is reported ahead of bad input.
            missing = self.config.missing_settings()
            message = _missing_config_message(missing) if missing else join_messages(errors)
            token = self.tracker.begin()
            result = EmailFailure(message=message, generation=token)
            self.tracker.finish(token, result, succeeded=False)
            return result
        return self.share_summary(req, request_id=request_id)

    def share_summary(self, req: EmailRequest, request_id: Optional[str] = None) -> EmailResult:
        request_id = request_id or new_request_id()
        token = self.tracker.begin()

        try:
            self._check_config()
            checked, errors = validate_email_input(req.recipient, req.body)
            if checked is None:
                raise ValidationError(errors)
            self._send(checked, request_id)
            result: EmailResult = EmailSuccess(generation=token)
        except ConfigurationError as e:
            logger.warning(f"[{request_id}] share_config_missing missing={e.missing}")
            result = EmailFailure(message=_missing_config_message(e.missing), generation=token)
        except ValidationError as e:
            result = EmailFailure(message=join_messages(e.messages), generation=token)
        except ProviderError as e:
            result = EmailFailure(message=str(e), generation=token)

        applied = self.tracker.finish(token, result, succeeded=isinstance(result, EmailSuccess))
        if not applied:
            logger.info(f"[{request_id}] share_superseded generation={token} latest={self.tracker.generation}")
        logger.info(f"[{request_id}] share_end generation={token} outcome={result.kind}")
        return result

    def _check_config(self) -> None:
        missing = self.config.missing_settings()
        if missing:
            raise ConfigurationError(missing)

    def _payload(self, req: EmailRequest) -> Dict[str, Any]:
        return {
            "service_id": self.config.service_id,
            "template_id": self.config.template_id,
            "user_id": self.config.public_key,
            "accessToken": self.config.private_key,
            "template_params": {
                "to_email": req.recipient,
                "summary": req.body,
                "from_name": self.config.from_name,
                "subject": self.config.subject,
            },
        }

    def _send(self, req: EmailRequest, request_id: str) -> None:
        logger.info(f"[{request_id}] share_start body_chars={len(req.body)}")
        try:
            resp = self._client.post(self.config.api_url, json=self._payload(req))
        except httpx.HTTPError as e:
            logger.error(f"[{request_id}] share_error: {type(e).__name__}: {e}")
            raise ProviderError(f"Failed to send email: {e}") from e

        if not resp.is_success:
            logger.error(f"[{request_id}] share_rejected status={resp.status_code}")
            raise ProviderError(f"Email provider returned HTTP {resp.status_code}: {resp.text}")


def _missing_config_message(missing) -> str:
    return f"Email is not configured. Missing settings: {', '.join(missing)}."
