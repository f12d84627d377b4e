"""Turn raw provider text into an analysis result the renderer can trust.

`normalize` runs an ordered chain and stops at the first stage that yields a
complete result:

  1. strip the envelope (BOM, zero-width chars, code fences, prose around the object)
  2. parse as-is
  3. repair the text (see `repairs`) and parse again, then hand it to json_repair
  4. parse every balanced ``{...}`` fragment, keep the longest that passes
     the relaxed schema
  5. fill the fields a partial result lost with labelled placeholders
  6. give up and build the deterministic default result

It never raises for string input.
"""
import copy
import json
import logging
import math
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from json_repair import repair_json

from .repairs import repair
from .validator import Complete, MissingFields, Partial, ValidationOutcome, classify, validate_complete

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 7.0
FALLBACK_PREFIX_CHARS = 200

DEFAULT_INTRODUCTION = "Your script could not be analyzed automatically. Please review the introduction and try again."
DEFAULT_MAIN_CONTENT = "Present the main ideas step by step, with one concrete example for each. [VISUAL CUE]"
DEFAULT_CONCLUSION = "Summarize the key points covered in this script."
DEFAULT_CALL_TO_ACTION = "Apply what you learned and share your questions."

SCRIPT_PLACEHOLDERS = {
    "mainContent": "[Main content section needs to be added]",
    "conclusion": "[Conclusion section needs to be added]",
    "callToAction": "[Call to action needs to be added]",
}

_INVISIBLE_RE = re.compile("[\u200b-\u200d\u2060\ufeff\ufffe]")
_FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?")

_NUMERIC_ANALYSIS_KEYS = ("readabilityScore", "overallScore")
_NUMERIC_METRIC_KEYS = ("fleschKincaid", "wordsPerSentence")


# -----------------------------
# Envelope
# -----------------------------

def strip_envelope(raw_text: str) -> str:
    text = _INVISIBLE_RE.sub("", raw_text)
    text = _FENCE_RE.sub("", text).strip()
    start = text.find("{")
    if start == -1:
        return text
    end = text.rfind("}")
    if end < start:
        return text[start:]
    return text[start:end + 1]


# -----------------------------
# Parse strategies (str -> decoded value or None)
# -----------------------------

def _decode(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def parse_direct(text: str) -> Optional[Any]:
    return _decode(text)


def parse_repaired(text: str) -> Optional[Any]:
    return _decode(repair(text))


def parse_lenient(text: str) -> Optional[Any]:
    """Last resort: let json_repair rebuild the document (missing commas, unclosed
    strings and the like). It returns "" when it finds nothing."""
    try:
        return repair_json(text, return_objects=True)
    except (ValueError, RecursionError):
        return None


PARSE_STRATEGIES: List[Tuple[str, Callable[[str], Optional[Any]]]] = [
    ("direct", parse_direct),
    ("repaired", parse_repaired),
    ("lenient", parse_lenient),
]


def _to_number(value: Any) -> Any:
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return value
        if math.isfinite(number):
            return number
    return value


def _coerce_keys(obj: Dict[str, Any], keys: Tuple[str, ...]) -> None:
    for key in keys:
        if key in obj:
            obj[key] = _to_number(obj[key])


def coerce_numbers(value: Any) -> Any:
    """Turn numeric strings ("8.5") in score fields into floats, in place.

    Anything that does not parse to a finite number is left for the
    validator to reject.
    """
    analysis = value.get("analysis") if isinstance(value, dict) else None
    if not isinstance(analysis, dict):
        return value
    _coerce_keys(analysis, _NUMERIC_ANALYSIS_KEYS)
    sections = analysis.get("sections")
    if isinstance(sections, dict):
        for section in sections.values():
            if not isinstance(section, dict):
                continue
            _coerce_keys(section, ("score",))
            metrics = section.get("readabilityMetrics")
            if isinstance(metrics, dict):
                _coerce_keys(metrics, _NUMERIC_METRIC_KEYS)
    return value


def _attempt(strategy: Callable[[str], Optional[Any]], text: str) -> Optional[ValidationOutcome]:
    decoded = strategy(text)
    if decoded is None:
        return None
    return classify(coerce_numbers(decoded))


# -----------------------------
# Fragments
# -----------------------------

def iter_fragments(text: str) -> Iterator[str]:
    """Yield balanced ``{...}`` substrings, longest first.

    Plain bracket-depth matching: braces inside string values are counted
    too, which is good enough to find candidate objects.
    """
    spans: List[Tuple[int, int]] = []
    stack: List[int] = []
    for pos, ch in enumerate(text):
        if ch == "{":
            stack.append(pos)
        elif ch == "}" and stack:
            spans.append((stack.pop(), pos + 1))
    spans.sort(key=lambda span: (span[0] - span[1], span[0]))
    for start, end in spans:
        yield text[start:end]


def _best_fragment(text: str) -> Optional[Tuple[int, ValidationOutcome]]:
    for fragment in iter_fragments(text):
        for _name, strategy in PARSE_STRATEGIES:
            outcome = _attempt(strategy, fragment)
            if isinstance(outcome, (Complete, Partial)):
                return len(fragment), outcome
    return None


# -----------------------------
# Partial fill and default result
# -----------------------------

def fill_missing(value: Dict[str, Any], missing: MissingFields) -> Dict[str, Any]:
    """Return a copy of a partial result with placeholders for the missing fields.

    Fields that are present are left exactly as they were.
    """
    filled = copy.deepcopy(value)
    analysis = filled["analysis"]
    for key in missing.analysis_fields:
        analysis[key] = []
    script = filled["rewrittenScript"]
    for key in missing.script_fields:
        script[key] = [] if key == "learningObjectives" else SCRIPT_PLACEHOLDERS[key]
    return filled


def build_default_result(original_script: str = "") -> Dict[str, Any]:
    """The result used when nothing usable came back from the provider.

    Deterministic: the only input is the user's own script, whose first
    `FALLBACK_PREFIX_CHARS` characters stand in for the rewritten introduction.
    """
    introduction = original_script[:FALLBACK_PREFIX_CHARS] if original_script else DEFAULT_INTRODUCTION
    return {
        "analysis": {
            "technicalTerms": [],
            "readabilityScore": DEFAULT_SCORE,
            "suggestions": ["Review the script for clarity, structure and pacing"],
            "overallScore": DEFAULT_SCORE,
            "prioritizedImprovements": ["Add clear learning objectives and a closing call to action"],
            "sections": {
                "introduction": {
                    "score": DEFAULT_SCORE,
                    "suggestions": ["Open with a hook that tells the viewer why the topic matters"],
                    "readabilityMetrics": {
                        "fleschKincaid": 8.0,
                        "wordsPerSentence": 15.0,
                        "technicalTerms": [],
                    },
                },
            },
        },
        "rewrittenScript": {
            "learningObjectives": ["Understand the key ideas presented in the script"],
            "introduction": introduction,
            "mainContent": DEFAULT_MAIN_CONTENT,
            "conclusion": DEFAULT_CONCLUSION,
            "callToAction": DEFAULT_CALL_TO_ACTION,
        },
    }


# -----------------------------
# Entry point
# -----------------------------

def normalize(raw_text: str, original_script: str = "") -> Dict[str, Any]:
    if not isinstance(raw_text, str):
        raise TypeError(f"raw_text must be str, not {type(raw_text).__name__}")
    original_script = original_script or ""

    text = strip_envelope(raw_text)
    best: Optional[Tuple[int, Partial]] = None

    for name, strategy in PARSE_STRATEGIES:
        outcome = _attempt(strategy, text)
        if isinstance(outcome, Complete):
            logger.debug("Provider response parsed (%s)", name)
            return outcome.value
        if isinstance(outcome, Partial) and best is None:
            best = (len(text), outcome)

    found = _best_fragment(text)
    if found is not None:
        length, outcome = found
        if isinstance(outcome, Complete):
            logger.info("Provider response recovered from a %d-char fragment", length)
            return outcome.value
        if best is None or length > best[0]:
            best = (length, outcome)

    if best is not None:
        partial = best[1]
        filled = fill_missing(partial.value, partial.missing)
        if validate_complete(filled):
            logger.warning("Provider response incomplete; placeholders for %s", ", ".join(partial.missing.as_paths()))
            return filled

    logger.warning("Provider response unusable (%d chars); returning default analysis", len(raw_text))
    return build_default_result(original_script)
