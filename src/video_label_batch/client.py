"""Shared Video Intelligence client: label detection on raw video bytes."""

from __future__ import annotations

import asyncio
import logging

from google.api_core import exceptions as gexc
from google.auth.exceptions import DefaultCredentialsError, GoogleAuthError
from google.cloud import videointelligence
from pydantic import ValidationError

from .config import get_config
from .errors import AnnotationError, ErrorCategory, categorize_error
from .ranking import collect_shot_labels
from .retry import with_retry

logger = logging.getLogger(__name__)


class AnnotationClient:
    """Process-wide async Video Intelligence client."""

    _client: videointelligence.VideoIntelligenceServiceAsyncClient | None = None

    @classmethod
    def get(cls) -> videointelligence.VideoIntelligenceServiceAsyncClient:
        """Return (or create) the shared client using Application Default Credentials."""
        if cls._client is None:
            try:
                cls._client = videointelligence.VideoIntelligenceServiceAsyncClient()
            except DefaultCredentialsError as exc:
                raise AnnotationError(
                    f"Cannot create Video Intelligence client: {exc}",
                    category=ErrorCategory.CREDENTIALS_MISSING,
                ) from exc
            logger.info("Created Video Intelligence client")
        return cls._client

    @classmethod
    async def annotate_video(
        cls,
        data: bytes,
        *,
        timeout: float | None = None,
    ) -> videointelligence.AnnotateVideoResponse:
        """Submit one LABEL_DETECTION request and wait for the operation.

        Args:
            data: Raw bytes of the video file.
            timeout: Seconds to wait for the long-running operation
                (defaults to config's operation_timeout).

        Raises:
            AnnotationError: If the remote call fails or runs past the deadline.
        """
        resolved_timeout = timeout if timeout is not None else get_config().operation_timeout
        client = cls.get()
        request = videointelligence.AnnotateVideoRequest(
            input_content=data,
            features=[videointelligence.Feature.LABEL_DETECTION],
        )

        async def _submit_and_wait() -> videointelligence.AnnotateVideoResponse:
            operation = await client.annotate_video(request=request)
            logger.info("Waiting for operation to complete...")
            return await operation.result(timeout=resolved_timeout)

        try:
            return await with_retry(_submit_and_wait)
        except (gexc.GoogleAPIError, GoogleAuthError, asyncio.TimeoutError, TimeoutError) as exc:
            category, _ = categorize_error(exc)
            raise AnnotationError(f"Label detection failed: {exc}", category=category) from exc

    @classmethod
    async def annotate_labels(
        cls,
        data: bytes,
        *,
        timeout: float | None = None,
        aggregation: str | None = None,
    ) -> dict[str, float]:
        """Detect labels in *data* and return shot-level label -> confidence.

        Args:
            data: Raw bytes of the video file.
            timeout: Override the operation deadline in seconds.
            aggregation: ``"last"`` or ``"max"`` for repeated labels
                (defaults to config's aggregation).

        Returns:
            Mapping of label description to confidence, in first-seen order.
        """
        response = await cls.annotate_video(data, timeout=timeout)
        try:
            return collect_shot_labels(response, aggregation or get_config().aggregation)
        except ValidationError as exc:
            raise AnnotationError(
                f"Malformed label annotation: {exc}",
                category=ErrorCategory.API_INVALID_RESPONSE,
            ) from exc

    @classmethod
    async def close_all(cls) -> int:
        """Close the shared client transport. Returns count closed."""
        if cls._client is None:
            return 0
        client, cls._client = cls._client, None
        try:
            await client.transport.close()
        except Exception as exc:
            logger.debug("Ignoring error while closing client: %s", exc)
        logger.info("Closed Video Intelligence client")
        return 1
