import logging
from typing import Any, Dict, List, Optional

from . import llm_client
from .catalog import resolve_model
from .logger import timed
from .models import ModelInfo
from .normalizer import normalize
from .prompts import build_analysis_prompt
from .utils import summarize, truncate_center

logger = logging.getLogger(__name__)


def analyze_script(script: str, model_id: str, catalog: Optional[List[ModelInfo]] = None) -> Dict[str, Any]:
    """
    Run one script through the selected model and return a complete-shaped
    analysis result. Provider failures raise `ProviderError`; anything the
    provider does return is normalized, never rejected.
    """
    model = resolve_model(catalog or [], model_id)
    prompt = build_analysis_prompt(truncate_center(script, llm_client.MAX_SCRIPT_CHARS), model.id)

    with timed(f"LLM {model.id}"):
        raw = llm_client.complete(prompt, model)

    with timed("Normalize"):
        result = normalize(raw, script)

    logger.info("Analysis with %s: %s", model.id, summarize(result))
    return result
