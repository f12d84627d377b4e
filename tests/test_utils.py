from script_auditor.utils import (
    is_implemented,
    split_visual_cues,
    strip_marker,
    summarize,
    truncate_center,
)


def test_truncate_center_keeps_head_and_tail():
    text = "A" * 50 + "B" * 50
    out = truncate_center(text, 30)
    assert out.startswith("A" * 20)
    assert out.endswith("B" * 10)
    assert "\n...\n" in out


def test_truncate_center_short_text_untouched():
    assert truncate_center("short", 30) == "short"
    assert truncate_center("", 30) == ""
    assert truncate_center(None, 30) == ""


def test_implemented_marker():
    assert is_implemented("Add a hook [IMPLEMENTED]")
    assert not is_implemented("Define REST")
    assert not is_implemented(None)
    assert strip_marker("Add a hook [IMPLEMENTED]") == "Add a hook"


def test_split_visual_cues():
    parts = split_visual_cues("Intro. [VISUAL CUE: chart] Then more.[visual cue]")
    assert parts == [
        ("text", "Intro. "),
        ("cue", "VISUAL CUE: chart"),
        ("text", " Then more."),
        ("cue", "visual cue"),
    ]
    assert split_visual_cues("") == []


def test_summarize(full_result):
    summary = summarize(full_result)
    assert summary == {
        "overall_score": 8,
        "readability_score": 8,
        "implemented": 1,
        "suggestions": 3,
        "visual_cues": 1,
    }
