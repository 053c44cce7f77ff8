"""
Extraction orchestration: validate, sanitize, fetch, parse.
"""

from __future__ import annotations

import time
from uuid import uuid4

import aiohttp
import structlog

from webextract.crawler.http_client import HttpClient
from webextract.exceptions import ErrorKind, ExtractionError, InvalidUrlFormatError, error_kind
from webextract.extractor.protocols import ContentParser
from webextract.models import ExtractionFailure, ExtractionRequest, ExtractionResult, ExtractionSuccess
from webextract.observability.metrics import METRICS
from webextract.security.validation import UrlGuard

logger = structlog.get_logger(__name__)


class ExtractionService:
    """
    Single entry point of the extraction pipeline.

    ``extract`` is total: every failure of a sub-component comes back as an
    ExtractionFailure carrying the error message and a timestamp.
    """

    def __init__(self, url_guard: UrlGuard, http_client: HttpClient, parser: ContentParser) -> None:
        self.url_guard = url_guard
        self.http_client = http_client
        self.parser = parser

    async def __aenter__(self) -> "ExtractionService":
        await self.http_client.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.http_client.close()

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Extract the content of ``request.url``; never raises for pipeline errors."""
        start_time = time.monotonic()
        with structlog.contextvars.bound_contextvars(correlation_id=str(uuid4())):
            logger.info("Extraction started", url=request.url, include_images=request.include_images)
            try:
                result: ExtractionResult = await self._run(request)
            except Exception as e:
                result = self._failure(e)

            duration = time.monotonic() - start_time
            if result.ok:
                METRICS["extractions_total"].labels(outcome="success").inc()
                logger.info("Extraction succeeded", url=request.url, duration=round(duration, 3))
            else:
                METRICS["extractions_total"].labels(outcome=result.kind.value).inc()
                logger.warning(
                    "Extraction failed",
                    url=request.url,
                    kind=result.kind.value,
                    error=result.error,
                    duration=round(duration, 3),
                )
            return result

    async def _run(self, request: ExtractionRequest) -> ExtractionSuccess:
        if not self.url_guard.validate(request.url):
            raise InvalidUrlFormatError()
        url = self.url_guard.sanitize(request.url)

        response = await self.http_client.fetch(url)
        parsed = await self.parser.extract(response.text, url, request.include_images)

        return ExtractionSuccess(
            title=parsed.title,
            description=parsed.description,
            content=parsed.content,
            images=parsed.images if request.include_images else None,
            url=url,
        )

    @staticmethod
    def _failure(exc: Exception) -> ExtractionFailure:
        kind = error_kind(exc)
        # Network failures were already logged by the HTTP client.
        if kind is ErrorKind.UNEXPECTED_ERROR and not isinstance(exc, (ExtractionError, aiohttp.ClientError)):
            logger.error("Unexpected extraction error", error_type=type(exc).__name__, exc_info=exc)
        return ExtractionFailure(error=str(exc) or ExtractionError.default_message, kind=kind)

