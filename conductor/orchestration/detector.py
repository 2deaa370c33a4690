"""Tool reference detection in free text."""

import re

from conductor.config.models.orchestration import OrchestrationConfig
from conductor.observability.logging import get_logger
from conductor.observability.metrics import DETECTION_CONFIDENCE
from conductor.orchestration.models import AnalysisResult
from conductor.registry.store import ToolRegistry

logger = get_logger(__name__)


class ToolDetector:
    """Finds tool references such as ``@browser/content/screenshot`` in text.

    A reference is the configured namespace marker followed by one or more
    path segments made of letters, digits, underscores and slashes.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        config: OrchestrationConfig | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or OrchestrationConfig()
        self._pattern = re.compile(
            re.escape(self._config.tool_namespace) + r"/[a-zA-Z0-9_/]+"
        )

    def find_references(self, text: str) -> list[str]:
        """All references in order of occurrence, duplicates retained."""
        return self._pattern.findall(text)

    def analyze(self, text: str) -> AnalysisResult:
        """Scan text for tool references and score the detection."""
        detected = self.find_references(text)
        confidence = self.confidence(detected)
        DETECTION_CONFIDENCE.observe(confidence)

        logger.debug(
            "tools_detected",
            num_detected=len(detected),
            detected_tools=detected,
            confidence=confidence,
        )

        return AnalysisResult(
            contains_tools=len(detected) > 0,
            detected_tools=detected,
            confidence=confidence,
        )

    def confidence(self, detected: list[str]) -> float:
        """Mean of the validity, volume and completeness sub-scores.

        - validity: fraction of references present in the registry
        - volume: reference count relative to max_tools_for_full_score, capped at 1
        - completeness: fraction of references with at least
          min_complete_segments path segments
        """
        if not detected:
            return 0.0

        count = len(detected)
        valid = sum(1 for name in detected if self._registry.contains(name))
        complete = sum(
            1
            for name in detected
            if len(name.split("/")) >= self._config.min_complete_segments
        )

        validity_score = valid / count
        volume_score = min(count / self._config.max_tools_for_full_score, 1.0)
        completeness_score = complete / count

        return (validity_score + volume_score + completeness_score) / 3
