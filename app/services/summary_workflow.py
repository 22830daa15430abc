from __future__ import annotations

import logging
from typing import Optional

from app.core.errors import EmptyResultError, ProviderError, SummarizeShareError, ValidationError
from app.core.logging import new_request_id
from app.schemas.summarize import SummaryFailure, SummaryRequest, SummaryResult, SummarySuccess
from app.services.submissions import SubmissionTracker
from app.services.summarizer import SummarizationProvider
from app.services.validators import join_messages, validate_summary_input

logger = logging.getLogger(__name__)

EMPTY_SUMMARY_MESSAGE = (
    "The AI returned an empty summary. Please try a different prompt or transcript."
)
GENERIC_FAILURE_MESSAGE = (
    "An unexpected error occurred while generating the summary. Please check the server logs."
)


class SummaryWorkflow:
    """Validate a transcript + prompt, ask the provider once, map the outcome."""

    def __init__(self, provider: SummarizationProvider):
        self.provider = provider
        self.tracker = SubmissionTracker()

    def submit(self, transcript: Optional[str], prompt: Optional[str], request_id: Optional[str] = None) -> SummaryResult:
        """Validate raw input, then run request_summary."""
        req, errors = validate_summary_input(transcript, prompt)
        if req is None:
            token = self.tracker.begin()
            result = SummaryFailure(message=join_messages(errors), generation=token)
            self.tracker.finish(token, result, succeeded=False)
            return result
        return self.request_summary(req, request_id=request_id)

    def request_summary(self, req: SummaryRequest, request_id: Optional[str] = None) -> SummaryResult:
        request_id = request_id or new_request_id()
        token = self.tracker.begin()

        try:
            text = self._summarize(req, request_id)
            result: SummaryResult = SummarySuccess(text=text, generation=token)
        except ValidationError as e:
            result = SummaryFailure(message=join_messages(e.messages), generation=token)
        except EmptyResultError:
            result = SummaryFailure(message=EMPTY_SUMMARY_MESSAGE, generation=token)
        except SummarizeShareError:
            result = SummaryFailure(message=GENERIC_FAILURE_MESSAGE, generation=token)

        applied = self.tracker.finish(token, result, succeeded=isinstance(result, SummarySuccess))
        if not applied:
            logger.info(f"[{request_id}] summary_superseded generation={token} latest={self.tracker.generation}")
        logger.info(f"[{request_id}] summary_end generation={token} outcome={result.kind}")
        return result

    def _summarize(self, req: SummaryRequest, request_id: str) -> str:
        # Requests can be built directly, so check them again here.
        checked, errors = validate_summary_input(req.transcript, req.prompt)
        if checked is None:
            raise ValidationError(errors)

        logger.info(
            f"[{request_id}] summary_start transcript_chars={len(checked.transcript)} "
            f"prompt_chars={len(checked.prompt)}"
        )
        try:
            text = self.provider.summarize(checked.transcript, checked.prompt)
        except Exception as e:
            logger.exception(f"[{request_id}] summarizer_error: {type(e).__name__}")
            raise ProviderError(str(e)) from e

        if not text or not text.strip():
            logger.warning(f"[{request_id}] summarizer_empty_result")
            raise EmptyResultError()
        return text
