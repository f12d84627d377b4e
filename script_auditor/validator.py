"""Two-tier schema check for decoded provider output.

A value is *complete* when it matches `AnalysisResult`, *partial* when it only
matches the relaxed `PartialAnalysisResult` (typically a generation that was
cut short and lost its trailing fields), and *invalid* otherwise. Neither tier
raises for any decoded JSON value.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from .models import AnalysisResult, PartialAnalysisResult

# (python attribute, wire key) of the fields the relaxed tier lets go missing
_OPTIONAL_SECTIONS = (
    ("main_content", "mainContent"),
    ("conclusion", "conclusion"),
)
_OPTIONAL_ANALYSIS_FIELDS = (
    ("technical_terms", "technicalTerms"),
    ("suggestions", "suggestions"),
    ("prioritized_improvements", "prioritizedImprovements"),
)
_OPTIONAL_SCRIPT_FIELDS = (
    ("learning_objectives", "learningObjectives"),
    ("main_content", "mainContent"),
    ("conclusion", "conclusion"),
    ("call_to_action", "callToAction"),
)


@dataclass(frozen=True)
class MissingFields:
    analysis_fields: Tuple[str, ...] = ()
    sections: Tuple[str, ...] = ()
    script_fields: Tuple[str, ...] = ()

    @property
    def needs_placeholders(self) -> bool:
        # absent sections are reported but never filled
        return bool(self.analysis_fields or self.script_fields)

    def as_paths(self) -> Tuple[str, ...]:
        return (
            tuple(f"analysis.{k}" for k in self.analysis_fields)
            + tuple(f"analysis.sections.{k}" for k in self.sections)
            + tuple(f"rewrittenScript.{k}" for k in self.script_fields)
        )


@dataclass(frozen=True)
class Complete:
    value: Dict[str, Any]


@dataclass(frozen=True)
class Partial:
    value: Dict[str, Any]
    missing: MissingFields


@dataclass(frozen=True)
class Invalid:
    reason: str


ValidationOutcome = Union[Complete, Partial, Invalid]


def _check(model: Type[BaseModel], value: Any) -> Tuple[Optional[BaseModel], Optional[str]]:
    if not isinstance(value, dict):
        return None, f"expected a JSON object, got {type(value).__name__}"
    try:
        return model.model_validate(value), None
    except ValidationError as e:
        return None, "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )


def validate_complete(value: Any) -> bool:
    parsed, _ = _check(AnalysisResult, value)
    return parsed is not None


def validate_partial(value: Any) -> Optional[PartialAnalysisResult]:
    parsed, _ = _check(PartialAnalysisResult, value)
    return parsed


def find_missing_fields(partial: PartialAnalysisResult) -> MissingFields:
    analysis = partial.analysis
    script = partial.rewritten_script
    return MissingFields(
        analysis_fields=tuple(key for attr, key in _OPTIONAL_ANALYSIS_FIELDS if getattr(analysis, attr) is None),
        sections=tuple(key for attr, key in _OPTIONAL_SECTIONS if getattr(analysis.sections, attr) is None),
        script_fields=tuple(key for attr, key in _OPTIONAL_SCRIPT_FIELDS if getattr(script, attr) is None),
    )


def classify(value: Any) -> ValidationOutcome:
    if validate_complete(value):
        return Complete(value)
    partial, reason = _check(PartialAnalysisResult, value)
    if partial is None:
        return Invalid(reason or "does not match the analysis schema")
    return Partial(value, find_missing_fields(partial))
