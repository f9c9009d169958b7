import logging
from typing import Optional, Union

from ..clients.llm_client import GenerationClient
from ..core.config import Settings
from ..core.errors import MethodNotAllowed, ReportError, ServiceExpired, UnexpectedError
from ..core.monitor import StepMonitor, log_step, new_request_id
from .expiry import Clock, ExpiryGate, utc_now
from .prompts import build_prompt
from .validation import parse_body, validate_request

logger = logging.getLogger(__name__)

FALLBACK_HTML = "<p>Sorry, the report could not be generated. Please try again later.</p>"


class FortuneReportService:
    """
    Runs one report request end to end:
    method gate -> expiry gate -> validation -> prompt -> generation -> sign-off.

    Every stage raises a ``ReportError`` subclass on failure; anything else is
    logged and re-raised as ``UnexpectedError``.
    """

    def __init__(self, settings: Settings, client: GenerationClient, clock: Clock = utc_now):
        self.settings = settings
        self.client = client
        self.expiry_gate = ExpiryGate(settings.expiry_date, clock=clock)

    def append_sign_off(self, html: str) -> str:
        if not self.settings.sign_off_html:
            return html
        return f"{html}\n{self.settings.sign_off_html}"

    async def handle(self, method: str, raw_body: Union[bytes, str, None],
                     request_id: Optional[str] = None) -> str:
        request_id = request_id or new_request_id()
        try:
            return await self._run(method, raw_body, request_id)
        except ReportError as e:
            logger.warning(f"[{request_id}] {type(e).__name__} ({e.status_code}): {e}")
            raise
        except Exception as e:
            logger.exception(f"[{request_id}] Unexpected error in fortune handler: {e}")
            raise UnexpectedError(str(e)) from e

    async def _run(self, method: str, raw_body: Union[bytes, str, None], request_id: str) -> str:
        if method.upper() != "POST":
            raise MethodNotAllowed(f"{method} is not allowed")

        with StepMonitor("expiry_check", request_id=request_id, extra_data={"cutoff": self.settings.expiry_date}):
            if self.expiry_gate.is_expired():
                raise ServiceExpired(f"Service expired at {self.expiry_gate.cutoff.isoformat()}")

        with StepMonitor("validate", request_id=request_id):
            request = validate_request(parse_body(raw_body))
        logger.debug(f"[{request_id}] Validated dob={request.dob} language={request.language}")

        with StepMonitor("build_prompt", request_id=request_id, extra_data={"language": request.language}):
            prompt = build_prompt(request)

        with StepMonitor("generate", request_id=request_id, extra_data={
            "model": self.settings.openai_model,
            "api_style": self.settings.openai_api_style,
        }):
            html = await self.client.generate(prompt)

        if not html:
            logger.warning(f"[{request_id}] Generation API returned no text, using fallback message")
            html = FALLBACK_HTML

        result_html = self.append_sign_off(html)
        log_step("respond", request_id=request_id, extra_data={"html_length": len(result_html)})
        return result_html
