import re
from typing import Any, Dict, List, Tuple

IMPLEMENTED_MARKER = "[IMPLEMENTED]"
VISUAL_CUE_RE = re.compile(r"\[(VISUAL CUE[^\]]*)\]", re.IGNORECASE)
SCRIPT_TEXT_FIELDS = ("introduction", "mainContent", "conclusion", "callToAction")


def truncate_center(text: str, max_len: int) -> str:
    """Keep head+tail so the opening and the call to action both reach the model."""
    if not text or len(text) <= max_len:
        return text or ""
    head = max_len * 2 // 3  # ~66%
    tail = max_len - head
    return text[:head] + "\n...\n" + text[-tail:]


def is_implemented(text: str) -> bool:
    return IMPLEMENTED_MARKER in (text or "")


def strip_marker(text: str) -> str:
    return (text or "").replace(IMPLEMENTED_MARKER, "").strip()


def split_visual_cues(text: str) -> List[Tuple[str, str]]:
    """
    Split rewritten-script text around its [VISUAL CUE ...] markers.
    Returns ("text", chunk) and ("cue", marker body) pairs in order.
    """
    text = text or ""
    parts: List[Tuple[str, str]] = []
    pos = 0
    for m in VISUAL_CUE_RE.finditer(text):
        if m.start() > pos:
            parts.append(("text", text[pos:m.start()]))
        parts.append(("cue", m.group(1)))
        pos = m.end()
    if pos < len(text):
        parts.append(("text", text[pos:]))
    return parts


def summarize(result: Dict[str, Any]) -> Dict[str, Any]:
    analysis = result["analysis"]
    script = result["rewrittenScript"]
    items = analysis["suggestions"] + analysis["prioritizedImprovements"]
    cues = sum(
        1 for field in SCRIPT_TEXT_FIELDS
        for kind, _ in split_visual_cues(script[field]) if kind == "cue"
    )
    return {
        "overall_score": analysis["overallScore"],
        "readability_score": analysis["readabilityScore"],
        "implemented": sum(1 for s in items if is_implemented(s)),
        "suggestions": len(items),
        "visual_cues": cues,
    }
