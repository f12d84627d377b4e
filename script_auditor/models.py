import math
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, PlainValidator, StrictStr
from pydantic.alias_generators import to_camel


def _finite_number(value: Any) -> Any:
    # bool is an int subclass; JSON true/false is never a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise ValueError("must be a finite number")
    return value


Number = Annotated[float, PlainValidator(_finite_number)]
TextList = List[StrictStr]


class _WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python. Only the camelCase keys
    are accepted, so a snake_case provider response does not validate."""

    model_config = ConfigDict(alias_generator=to_camel, extra="allow")


class ReadabilityMetrics(_WireModel):
    flesch_kincaid: Number
    words_per_sentence: Number
    technical_terms: TextList


class Section(_WireModel):
    score: Number
    suggestions: TextList
    readability_metrics: ReadabilityMetrics
    ai_enhancements: Optional[StrictStr] = None


class Sections(_WireModel):
    """Only the named sections are checked; other keys ride along unvalidated."""

    introduction: Section
    main_content: Optional[Section] = None
    conclusion: Optional[Section] = None


# -----------------------------
# Relaxed tier: what a truncated-but-parseable response still has to carry
# -----------------------------

class PartialAnalysis(_WireModel):
    technical_terms: Optional[TextList] = None
    readability_score: Number
    suggestions: Optional[TextList] = None
    overall_score: Number
    prioritized_improvements: Optional[TextList] = None
    sections: Sections


class PartialRewrittenScript(_WireModel):
    title: Optional[StrictStr] = None
    learning_objectives: Optional[TextList] = None
    introduction: StrictStr
    main_content: Optional[StrictStr] = None
    conclusion: Optional[StrictStr] = None
    call_to_action: Optional[StrictStr] = None


class PartialAnalysisResult(_WireModel):
    analysis: PartialAnalysis
    rewritten_script: PartialRewrittenScript


# -----------------------------
# Complete tier
# -----------------------------

class Analysis(PartialAnalysis):
    technical_terms: TextList
    suggestions: TextList
    prioritized_improvements: TextList


class RewrittenScript(PartialRewrittenScript):
    learning_objectives: TextList
    main_content: StrictStr
    conclusion: StrictStr
    call_to_action: StrictStr


class AnalysisResult(_WireModel):
    analysis: Analysis
    rewritten_script: RewrittenScript


# -----------------------------
# Model catalog
# -----------------------------

class ModelInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    provider: str
    description: str = ""
    context_window: int
    paid: bool = False
    max_tokens: int = 4000
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
