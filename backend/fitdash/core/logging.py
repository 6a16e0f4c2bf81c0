"""
Structured logging for FitDash.

Events are key-value pairs, rendered as JSON or for the console. Calls to the
text-generation endpoint are traced with `AIDebugLogger`: sizes, timing and
outcome always, prompt and response bodies only with AI_DEBUG_LOG set.
API keys are never logged.
"""
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from fitdash.core.config import Settings, settings as default_settings

# Third-party loggers kept at WARNING
QUIET_LOGGERS = ("uvicorn.access", "httpx", "sqlalchemy.engine")

_handler: Optional[logging.Handler] = None


def setup_logging(config: Settings = default_settings) -> None:
    """Route structlog and stdlib records through one stdout handler."""
    global _handler

    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if config.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    # Setup may run once per app instance; replace our handler, never stack it
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    root.addHandler(_handler)
    root.setLevel(config.LOG_LEVEL.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def _truncate(content: str, max_length: int) -> str:
    if max_length <= 0 or len(content) <= max_length:
        return content
    return content[:max_length] + f"... [truncated, total {len(content)} chars]"


class AICallTracker:
    """Timing, sizes and outcome of one text-generation call."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        provider: str,
        model: str,
        endpoint: str,
        debug: bool = False,
        max_length: int = 0,
    ):
        self.call_id = uuid.uuid4().hex[:8]
        self.logger = logger.bind(
            call_id=self.call_id, provider=provider, model=model, endpoint=endpoint
        )
        self.debug = debug
        self.max_length = max_length

        self.prompt_chars = 0
        self.response_chars = 0
        self.status_code: Optional[int] = None
        self.error_type: Optional[str] = None
        self.error_message: Optional[str] = None
        self._started = time.perf_counter()

    @property
    def failed(self) -> bool:
        return self.error_type is not None

    def set_prompt(self, prompt: str) -> None:
        self.prompt_chars = len(prompt)
        self.logger.info("AI request", prompt_chars=self.prompt_chars)
        if self.debug:
            self.logger.debug("AI request prompt", content=_truncate(prompt, self.max_length))

    def set_response(self, status_code: int, content: str) -> None:
        self.status_code = status_code
        self.response_chars = len(content)
        if self.debug:
            self.logger.debug(
                "AI response content",
                status_code=status_code,
                content=_truncate(content, self.max_length),
            )

    def set_error(self, error_type: str, error_message: str) -> None:
        self.error_type = error_type
        self.error_message = error_message

    def finish(self) -> None:
        duration_ms = round((time.perf_counter() - self._started) * 1000, 2)
        if self.failed:
            self.logger.error(
                "AI call failed",
                duration_ms=duration_ms,
                status_code=self.status_code,
                error_type=self.error_type,
                error_message=self.error_message,
            )
        else:
            self.logger.info(
                "AI call completed",
                duration_ms=duration_ms,
                status_code=self.status_code,
                request_chars=self.prompt_chars,
                response_chars=self.response_chars,
            )


class AIDebugLogger:
    """
    Usage:
        debug_logger = AIDebugLogger(logger)
        with debug_logger.track_call("gemini", "gemini-2.5-flash") as call:
            call.set_prompt(prompt)
            call.set_response(status_code, body_text)
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, config: Settings = default_settings):
        self.logger = logger
        self.config = config

    @contextmanager
    def track_call(
        self,
        provider: str,
        model: str,
        endpoint: str = "generateContent",
    ) -> Iterator[AICallTracker]:
        call = AICallTracker(
            self.logger,
            provider=provider,
            model=model,
            endpoint=endpoint,
            debug=self.config.AI_DEBUG_LOG,
            max_length=self.config.AI_DEBUG_LOG_MAX_LENGTH,
        )
        try:
            yield call
        except Exception as e:
            # Keep a more specific error recorded by the caller
            if not call.failed:
                call.set_error(type(e).__name__, str(e))
            raise
        finally:
            call.finish()
