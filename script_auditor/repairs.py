"""Text repairs for almost-JSON returned by language models.

Each rule is an independent ``str -> str`` transform and `REPAIR_RULES` is
the order `repair` applies them in. The rules are heuristics: they fix the
usual damage (smart quotes, doubled escapes, stray quotes and newlines inside
strings, JavaScript-style keys and quotes, trailing commas) but can mis-repair
adversarial text, so the result still has to be parsed and validated.
"""
import re
from typing import Callable, Iterator, List, Tuple

_SMART_PUNCTUATION = str.maketrans({
    "“": '"', "”": '"', "„": '"', "‟": '"', "″": '"',
    "‘": "'", "’": "'", "‚": "'", "‛": "'", "′": "'",
    "–": "-", "—": "-",
    "…": "...",
    "\u00a0": " ",
})

# \\ + an escape char, or \\\\ (an escaped backslash escaped twice)
_DOUBLE_ESCAPE_RE = re.compile(r'\\\\(\\\\|["/bfnrt]|u[0-9a-fA-F]{4})')
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][\w$-]*)(\s*:)")
_SINGLE_QUOTED_RE = re.compile(r"(?<=[{\[,:])(\s*)'((?:[^'\\]|\\.)*)'(?=\s*[,}\]:])")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")

_WHITESPACE = " \t\r\n"
# what may follow "," when the quote before it really closed a string
_VALUE_OR_CLOSER = set("\"'{[-0123456789}]")
_LITERALS = ("true", "false", "null")
_BARE_KEY_RE = re.compile(r"[A-Za-z_$][\w$-]*\s*:")
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _segments(text: str) -> Iterator[Tuple[bool, str]]:
    """Split text into (is_string, chunk) runs; string chunks keep their quotes."""
    start = i = 0
    n = len(text)
    while i < n:
        if text[i] != '"':
            i += 1
            continue
        if i > start:
            yield False, text[start:i]
        j = i + 1
        while j < n and text[j] != '"':
            j += 2 if text[j] == "\\" else 1
        end = min(j + 1, n)
        yield True, text[i:end]
        start = i = end
    if start < n:
        yield False, text[start:]


def _outside_strings(text: str, fn: Callable[[str], str]) -> str:
    return "".join(chunk if is_string else fn(chunk) for is_string, chunk in _segments(text))


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def _closes_string(text: str, pos: int) -> bool:
    pos = _skip_whitespace(text, pos)
    if pos >= len(text) or text[pos] in ":}]":
        return True
    if text[pos] != ",":
        return False
    after = _skip_whitespace(text, pos + 1)
    if after >= len(text) or text[after] in _VALUE_OR_CLOSER:
        return True
    return text.startswith(_LITERALS, after) or _BARE_KEY_RE.match(text, after) is not None


# -----------------------------
# Rules
# -----------------------------

def normalize_smart_punctuation(text: str) -> str:
    return text.translate(_SMART_PUNCTUATION)


def collapse_double_escapes(text: str) -> str:
    def _collapse(m: "re.Match[str]") -> str:
        tail = m.group(1)
        return tail if tail == "\\\\" else "\\" + tail
    return _DOUBLE_ESCAPE_RE.sub(_collapse, text)


def escape_inner_quotes(text: str) -> str:
    """Escape a quote inside a string unless what follows it looks like JSON
    structure, e.g. ``"He said "hi" twice"`` -> ``"He said \\"hi\\" twice"``."""
    out: List[str] = []
    in_string = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if not in_string:
            in_string = ch == '"'
            out.append(ch)
            i += 1
        elif ch == "\\" and i + 1 < n:
            out.append(text[i:i + 2])
            i += 2
        elif ch == '"':
            if _closes_string(text, i + 1):
                in_string = False
                out.append(ch)
            else:
                out.append('\\"')
            i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def escape_literal_newlines(text: str) -> str:
    out: List[str] = []
    for is_string, chunk in _segments(text):
        if is_string:
            chunk = "".join(_CONTROL_ESCAPES.get(c, c) for c in chunk)
        out.append(chunk)
    return "".join(out)


def quote_unquoted_keys(text: str) -> str:
    return _outside_strings(text, lambda chunk: _UNQUOTED_KEY_RE.sub(r'\1"\2"\3', chunk))


def replace_single_quotes(text: str) -> str:
    def _requote(m: "re.Match[str]") -> str:
        body = m.group(2).replace("\\'", "'").replace('"', '\\"')
        return f'{m.group(1)}"{body}"'
    return _outside_strings(text, lambda chunk: _SINGLE_QUOTED_RE.sub(_requote, chunk))


def strip_trailing_commas(text: str) -> str:
    return _outside_strings(text, lambda chunk: _TRAILING_COMMA_RE.sub(r"\1", chunk))


REPAIR_RULES: List[Tuple[str, Callable[[str], str]]] = [
    ("smart_punctuation", normalize_smart_punctuation),
    ("double_escapes", collapse_double_escapes),
    ("inner_quotes", escape_inner_quotes),
    ("literal_newlines", escape_literal_newlines),
    ("unquoted_keys", quote_unquoted_keys),
    ("single_quotes", replace_single_quotes),
    ("trailing_commas", strip_trailing_commas),
]


def repair(text: str) -> str:
    for _name, rule in REPAIR_RULES:
        text = rule(text)
    return text
