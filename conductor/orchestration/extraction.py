"""Rule-based parameter extraction from user text.

Extraction is best effort: a tool whose phrases do not appear in the text
gets an empty parameter map.
"""

import re
from dataclasses import dataclass

URL_PATTERNS = (re.compile(r"https?://\S+"),)

# English verbs must not be preceded by "/" or a word character, so the
# last segment of a reference like "@browser/content/screenshot" is not
# read as the verb itself.
CLICK_PATTERNS = (
    re.compile(r"点击\s*(\S+)"),
    re.compile(r"(?<![/\w])click\s+(\S+)", re.IGNORECASE),
)

FILL_PATTERNS = (
    re.compile(r"填写\s*(\S+)\s*为\s*(\S+)"),
    re.compile(r"(?<![/\w])fill\s+(\S+)\s+(?:as|with)\s+(\S+)", re.IGNORECASE),
)

SCREENSHOT_PATTERNS = (
    re.compile(r"截图\s*(\S+)"),
    re.compile(r"(?<![/\w])screenshot\s+(\S+)", re.IGNORECASE),
)


@dataclass(frozen=True)
class ParameterRule:
    """Extracts named parameters for tools whose path contains ``tool_pattern``.

    ``fields`` name the regex groups in order; a pattern without groups
    yields its whole match under the first field.
    """

    tool_pattern: str
    patterns: tuple[re.Pattern[str], ...]
    fields: tuple[str, ...]

    def applies_to(self, tool_name: str) -> bool:
        return self.tool_pattern in tool_name

    def extract(self, text: str) -> dict[str, str]:
        for pattern in self.patterns:
            match = pattern.search(text)
            if match is None:
                continue
            groups = match.groups() or (match.group(0),)
            return dict(zip(self.fields, groups, strict=False))
        return {}


PARAMETER_RULES: tuple[ParameterRule, ...] = (
    ParameterRule("/navigation/navigate", URL_PATTERNS, ("url",)),
    ParameterRule("/interaction/click", CLICK_PATTERNS, ("selector",)),
    ParameterRule("/interaction/fill", FILL_PATTERNS, ("selector", "value")),
    ParameterRule("/content/screenshot", SCREENSHOT_PATTERNS, ("selector",)),
)


def extract_parameters(text: str, tool_name: str) -> dict[str, str]:
    """Collect parameters from every rule that applies to tool_name."""
    params: dict[str, str] = {}
    for rule in PARAMETER_RULES:
        if rule.applies_to(tool_name):
            params.update(rule.extract(text))
    return params
