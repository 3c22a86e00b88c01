"""Clients for the external text- and brand-extraction services.

Both services are black boxes: the engine only relies on their documented
request/response shapes.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from proposal_engine.core.config import Settings, get_settings
from proposal_engine.core.exceptions import ExtractionError, ValidationError
from proposal_engine.models import BrandPalette, ExtractedDocument

logger = logging.getLogger(__name__)

SUPPORTED_FILE_TYPES = ("pdf", "docx", "md", "txt")

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b")


class _ExtractionClient:
    """Shared plumbing for the extraction services."""

    service_name = "extraction"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._settings = settings
        self._transport = transport

    @property
    def settings(self) -> Settings:
        """Lazy load settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    async def _post(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.EXTRACTION_TIMEOUT_SECONDS,
                transport=self._transport
            ) as client:
                response = await client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{self.service_name} timeout calling {url}")
            raise ExtractionError(self.service_name, "service timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{self.service_name} request failed: {e}")
            raise ExtractionError(self.service_name, f"request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                f"{self.service_name} error: {response.status_code} - {response.text[:500]}"
            )
            raise ExtractionError(
                self.service_name,
                f"service returned HTTP {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ExtractionError(self.service_name, "service returned non-JSON body") from e


class TextExtractionService(_ExtractionClient):
    """Converts uploaded files (PDF, DOCX, Markdown, text) into plain text."""

    service_name = "text-extraction"

    async def extract_text(
        self,
        data: bytes,
        filename: str,
        content_type: Optional[str] = None
    ) -> ExtractedDocument:
        """
        Extract plain text from an uploaded file.

        Args:
            data: File bytes
            filename: Original file name, used for type detection
            content_type: Declared MIME type

        Returns:
            ExtractedDocument with the plain text
        """
        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if extension not in SUPPORTED_FILE_TYPES:
            raise ValidationError(
                f"Unsupported file type: {extension or 'unknown'}",
                details=f"Supported types: {', '.join(SUPPORTED_FILE_TYPES)}"
            )

        logger.info(f"Extracting text from {filename} ({len(data)} bytes)")

        body = await self._post(
            self.settings.TEXT_EXTRACTION_URL,
            files={"file": (filename, data, content_type or "application/octet-stream")}
        )

        text = body.get("text")
        if not isinstance(text, str):
            raise ExtractionError(self.service_name, "response has no text field")

        logger.info(f"Extracted {len(text)} chars from {filename}")
        return ExtractedDocument(
            text=text,
            file_name=body.get("fileName", filename),
            file_type=body.get("fileType", extension),
            length=len(text),
        )


class BrandExtractionService(_ExtractionClient):
    """Extracts a colour palette (and favicon) from a client website."""

    service_name = "brand-extraction"

    @staticmethod
    def _normalize_colors(raw: List[Any]) -> List[str]:
        colors: List[str] = []
        for value in raw:
            for match in _HEX_COLOR.findall(str(value)):
                color = match.lower()
                if color not in colors:
                    colors.append(color)
        return colors

    async def extract_brand(self, url: str) -> BrandPalette:
        """
        Extract brand colours from a website.

        Accepts either ``{"colors": [...], "favicon": ...}`` or the
        ``{"designSystem": {"colors": [...]}}`` shape.

        Args:
            url: Website URL

        Returns:
            BrandPalette with unique lowercase hex colours
        """
        if not url or not url.startswith(("http://", "https://")):
            raise ValidationError("URL must start with http:// or https://")

        logger.info(f"Extracting brand palette from {url}")

        body = await self._post(self.settings.BRAND_EXTRACTION_URL, json={"url": url})
        design = body.get("designSystem") or body

        palette = BrandPalette(
            url=url,
            colors=self._normalize_colors(design.get("colors") or []),
            favicon=design.get("favicon") or body.get("favicon"),
        )
        logger.info(f"Extracted {len(palette.colors)} colour(s) from {url}")
        return palette
