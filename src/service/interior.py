from __future__ import annotations

import logging
from pathlib import Path

from service.vision import GeminiVisionClient, VisionError
from valuation.config import DEFAULT_CONFIG, ValuationConfig
from valuation.data_models import InteriorAssessment
from valuation.errors import InputError, InputErrorKind
from valuation.rules import assess_interior, fallback_interior

logger = logging.getLogger(__name__)


class InteriorAnalyzer:
    """Classifies an uploaded interior photo and maps it to a value delta.

    Missing or unknown files are input errors; everything that goes wrong
    after the photo is found degrades to the fallback assessment.
    """

    def __init__(
        self,
        upload_dir: str | Path,
        vision: GeminiVisionClient,
        config: ValuationConfig = DEFAULT_CONFIG,
    ) -> None:
        self.upload_dir = Path(upload_dir)
        self.vision = vision
        self.config = config

    def resolve_upload(self, filename: str | None) -> Path:
        if not filename:
            raise InputError(InputErrorKind.MISSING_REQUIRED_FIELD, "filename", "filename is required")
        root = self.upload_dir.resolve()
        try:
            path = (root / filename).resolve()
            # Reject names that escape the upload directory.
            found = root in path.parents and path.is_file()
        except (OSError, ValueError):
            # NUL bytes and over-long names
            found = False
        if not found:
            raise InputError(InputErrorKind.RESOURCE_NOT_FOUND, "filename", "File not found")
        return path

    async def analyze(self, filename: str | None, base_price: float) -> InteriorAssessment:
        path = self.resolve_upload(filename)
        try:
            text = await self.vision.classify_interior(path)
        except (VisionError, OSError) as exc:
            logger.warning(
                "[Interior] Analysis failed: %s",
                exc,
                extra={"extra_data": {"file": path.name, "kind": "classifier_unavailable"}},
            )
            return fallback_interior(base_price, self.config)
        return assess_interior(text, base_price, self.config)
