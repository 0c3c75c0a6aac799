# SPDX-License-Identifier: AGPL-3.0-only

"""
Response normalization for legal answers.

The model is asked for raw JSON but often wraps it in code fences or prose.
``extract_json`` recovers the object; ``repair_answer`` fills in whatever the
model left out, while ``validate_answer_strict`` rejects the reply instead.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from common.errors import JsonNotFoundError, JsonParseError, ResponseValidationError
from .models import FLOWCHART_MARKERS


logger = logging.getLogger(__name__)

PREVIEW_CHARS = 100
MAX_CLARIFYING_QUESTIONS = 4

LABELED_FENCE = re.compile(r"```json\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)
PLAIN_FENCE = re.compile(r"```\s*\n?(.*?)\n?```", re.DOTALL)
TRAILING_COMMA = re.compile(r",\s*([}\]])")

DEFAULT_MATTER_SUMMARY = "Your legal matter has been reviewed."
DEFAULT_INCIDENT_TYPE = "Legal Inquiry"
GUIDANCE_PREFIX = "Based on the information available so far"
DEFAULT_GUIDANCE = f"{GUIDANCE_PREFIX}, please provide more details for specific guidance."
DEFAULT_LEGAL_PATHWAYS = [
    "Consult with a legal professional for personalized advice",
    "Review relevant documentation",
]
DEFAULT_FLOWCHART = (
    'flowchart TD\n'
    '  A["Your Legal Matter"] --> B["Review Details"]\n'
    '  B --> C["Seek Professional Advice"]'
)
DEFAULT_DISCLAIMER = (
    "This is general legal information based on facts you've provided, not legal advice. "
    "Please consult a licensed advocate for case-specific guidance."
)


# Extraction strategies

def _from_labeled_fence(text: str) -> Optional[str]:
    match = LABELED_FENCE.search(text)
    return match.group(1).strip() if match else None


def _from_plain_fence(text: str) -> Optional[str]:
    match = PLAIN_FENCE.search(text)
    return match.group(1).strip() if match else None


def _from_balanced_braces(text: str) -> Optional[str]:
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _from_outer_braces(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return None


EXTRACTION_STRATEGIES: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("labeled_fence", _from_labeled_fence),
    ("plain_fence", _from_plain_fence),
    ("balanced_braces", _from_balanced_braces),
    ("outer_braces", _from_outer_braces),
]


def find_json_candidate(text: str) -> Tuple[str, str]:
    """
    Locate the JSON substring of a model reply.

    Returns:
        (strategy_name, candidate)

    Raises:
        JsonNotFoundError: If no strategy yields a substring
    """
    cleaned = (text or "").strip()
    for name, strategy in EXTRACTION_STRATEGIES:
        candidate = strategy(cleaned)
        if candidate:
            logger.debug("Using extraction strategy %s, found %d chars", name, len(candidate))
            return name, candidate

    logger.error("No JSON found in reply: %s", cleaned[:500])
    raise JsonNotFoundError("Could not extract JSON from Claude response - no valid JSON found")


def parse_json_candidate(candidate: str) -> Dict[str, Any]:
    """
    Parse a JSON substring, stripping trailing commas on a second try.

    Raises:
        JsonParseError: If both attempts fail or the value is not an object
    """
    preview = candidate[:PREVIEW_CHARS]
    try:
        parsed = json.loads(candidate)
    except ValueError as first_error:
        try:
            parsed = json.loads(TRAILING_COMMA.sub(r"\1", candidate))
        except ValueError:
            raise JsonParseError(
                f"JSON parsing failed: {first_error}. Response preview: {preview}", preview
            ) from first_error
        logger.debug("JSON parsed after trailing comma fix")

    if not isinstance(parsed, dict):
        raise JsonParseError(
            f"JSON parsing failed: expected an object, got {type(parsed).__name__}. Response preview: {preview}",
            preview
        )
    return parsed


def extract_json(text: str) -> Dict[str, Any]:
    """Extract and parse the JSON object embedded in a model reply."""
    _, candidate = find_json_candidate(text)
    return parse_json_candidate(candidate)


# Validation

def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _has_flowchart_marker(value: str) -> bool:
    return any(marker in value for marker in FLOWCHART_MARKERS)


def _clean_string_list(items: List[Any]) -> List[str]:
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = item if isinstance(item, str) else str(item)
        if text.strip():
            cleaned.append(text)
    return cleaned


def render_steps(steps: List[Any]) -> str:
    """Render legacy ``steps`` as numbered conditional guidance."""
    lines = [f"{i}. {step}" for i, step in enumerate(steps, start=1)]
    return f"{GUIDANCE_PREFIX}:\n" + "\n".join(lines)


def repair_answer(data: Dict[str, Any]) -> List[str]:
    """
    Fill in missing or malformed answer fields in place.

    Legacy replies (``summary``/``steps``) are mapped onto the current fields.
    Never raises.

    Returns:
        Notes naming each repaired field, empty when nothing changed
    """
    repairs = []

    if _is_blank(data.get("matterSummary")):
        legacy = data.get("summary")
        data["matterSummary"] = legacy if not _is_blank(legacy) else DEFAULT_MATTER_SUMMARY
        repairs.append("matterSummary was auto-repaired")

    if _is_blank(data.get("incidentType")):
        data["incidentType"] = DEFAULT_INCIDENT_TYPE
        repairs.append("incidentType was auto-repaired")

    questions = data.get("clarifyingQuestions")
    if not isinstance(questions, list):
        data["clarifyingQuestions"] = []
        repairs.append("clarifyingQuestions was auto-repaired to empty array")
    else:
        cleaned = _clean_string_list(questions)[:MAX_CLARIFYING_QUESTIONS]
        if cleaned != questions:
            data["clarifyingQuestions"] = cleaned
            repairs.append("clarifyingQuestions was trimmed")

    if _is_blank(data.get("conditionalGuidance")):
        steps = data.get("steps")
        if isinstance(steps, list) and steps:
            data["conditionalGuidance"] = render_steps(steps)
        else:
            data["conditionalGuidance"] = DEFAULT_GUIDANCE
        repairs.append("conditionalGuidance was auto-repaired")

    pathways = data.get("legalPathways")
    cleaned_pathways = _clean_string_list(pathways) if isinstance(pathways, list) else []
    if not cleaned_pathways:
        data["legalPathways"] = list(DEFAULT_LEGAL_PATHWAYS)
        repairs.append("legalPathways was auto-repaired")
    elif cleaned_pathways != pathways:
        data["legalPathways"] = cleaned_pathways
        repairs.append("legalPathways was trimmed")

    flowchart = data.get("flowchart")
    if _is_blank(flowchart):
        data["flowchart"] = DEFAULT_FLOWCHART
        repairs.append("flowchart was auto-repaired with default")
    elif not _has_flowchart_marker(flowchart):
        data["flowchart"] = f"{FLOWCHART_MARKERS[0]}\n{flowchart}"
        repairs.append("flowchart prefix was auto-repaired")

    if _is_blank(data.get("disclaimer")):
        data["disclaimer"] = DEFAULT_DISCLAIMER
        repairs.append("disclaimer was auto-repaired")

    if repairs:
        logger.warning("Response auto-repair applied: %s", repairs)
    return repairs


def validate_answer_strict(data: Dict[str, Any]) -> None:
    """
    Check every answer field and reject the reply on any defect.

    Raises:
        ResponseValidationError: Listing all violations found
    """
    violations = []

    for key in ("matterSummary", "incidentType", "conditionalGuidance", "disclaimer"):
        if _is_blank(data.get(key)):
            violations.append(f"{key} must be a non-empty string")

    questions = data.get("clarifyingQuestions")
    if not isinstance(questions, list):
        violations.append("clarifyingQuestions must be an array")
    else:
        if len(questions) > MAX_CLARIFYING_QUESTIONS:
            violations.append(f"clarifyingQuestions must have at most {MAX_CLARIFYING_QUESTIONS} items")
        if not all(isinstance(q, str) for q in questions):
            violations.append("clarifyingQuestions must contain only strings")

    pathways = data.get("legalPathways")
    if not isinstance(pathways, list) or len(pathways) < 1:
        violations.append("legalPathways must be a non-empty array")
    elif not all(isinstance(p, str) and p.strip() for p in pathways):
        violations.append("legalPathways must contain only non-empty strings")

    flowchart = data.get("flowchart")
    if _is_blank(flowchart):
        violations.append("flowchart must be a non-empty string")
    elif not _has_flowchart_marker(flowchart):
        violations.append(f"flowchart must contain '{FLOWCHART_MARKERS[0]}' or '{FLOWCHART_MARKERS[1]}'")

    if violations:
        raise ResponseValidationError(violations)


def normalize_answer(data: Dict[str, Any], mode: str = "repair") -> List[str]:
    """Run the validator selected by ``mode``; returns repair notes."""
    if mode == "strict":
        validate_answer_strict(data)
        return []
    return repair_answer(data)
