import json

from script_auditor.repairs import (
    REPAIR_RULES,
    collapse_double_escapes,
    escape_inner_quotes,
    escape_literal_newlines,
    normalize_smart_punctuation,
    quote_unquoted_keys,
    repair,
    replace_single_quotes,
    strip_trailing_commas,
)


def test_rules_run_in_documented_order():
    assert [name for name, _ in REPAIR_RULES] == [
        "smart_punctuation",
        "double_escapes",
        "inner_quotes",
        "literal_newlines",
        "unquoted_keys",
        "single_quotes",
        "trailing_commas",
    ]


def test_converts_smart_quotes_and_dashes():
    text = "{\u201ca\u201d: \u201cb \u2013 c\u2026\u201d, \u201cd\u201d: \u2018it\u2019s\u2019}"
    assert normalize_smart_punctuation(text) == "{\"a\": \"b - c...\", \"d\": 'it's'}"


def test_collapses_doubled_escapes():
    assert collapse_double_escapes(r'{"a": "one\\ntwo \\"x\\""}') == r'{"a": "one\ntwo \"x\""}'
    assert json.loads(collapse_double_escapes(r'{"a": "one\\ntwo"}')) == {"a": "one\ntwo"}


def test_collapses_quadruple_backslash_to_escaped_backslash():
    assert collapse_double_escapes(r'"C:\\\\dir"') == r'"C:\\dir"'


def test_leaves_non_escape_backslashes():
    assert collapse_double_escapes(r'"\\user"') == r'"\\user"'


def test_escapes_unescaped_inner_quotes():
    fixed = escape_inner_quotes('{"a": "He said "hi" twice", "b": 1}')
    assert json.loads(fixed) == {"a": 'He said "hi" twice', "b": 1}


def test_inner_quote_before_comma_and_prose():
    fixed = escape_inner_quotes('{"a": "say "hi", then leave", "b": true}')
    assert json.loads(fixed) == {"a": 'say "hi", then leave', "b": True}


def test_inner_quotes_leave_valid_json_alone(happy_text):
    assert escape_inner_quotes(happy_text) == happy_text


def test_escapes_literal_newlines_in_strings_only():
    text = '{\n  "a": "line1\nline2\tend"\n}'
    fixed = escape_literal_newlines(text)
    assert fixed == '{\n  "a": "line1\\nline2\\tend"\n}'
    assert json.loads(fixed) == {"a": "line1\nline2\tend"}


def test_quotes_unquoted_keys():
    assert quote_unquoted_keys("{analysis: {score: 8, sub_key : 1}}") == '{"analysis": {"score": 8, "sub_key" : 1}}'


def test_unquoted_keys_ignore_string_content():
    text = '{"a": "x, note: y"}'
    assert quote_unquoted_keys(text) == text


def test_replaces_single_quoted_delimiters():
    assert replace_single_quotes("{'a': 'b', 'c': ['d', 'e']}") == '{"a": "b", "c": ["d", "e"]}'


def test_single_quotes_keep_apostrophes():
    text = "{\"a\": \"it's 'fine', really\"}"
    assert replace_single_quotes(text) == text


def test_strips_trailing_commas():
    text = '{"a": [1, 2,], "b": "x,]",}'
    assert strip_trailing_commas(text) == '{"a": [1, 2], "b": "x,]"}'


def test_repair_combines_rules():
    text = "{title: 'Intro', \u201cnote\u201d: \u201cHe said \u201chi\u201d today\u201d, items: ['a', 'b',],}"
    assert json.loads(repair(text)) == {"title": "Intro", "note": 'He said "hi" today', "items": ["a", "b"]}


def test_repair_is_identity_on_valid_json(happy_text):
    assert repair(happy_text) == happy_text


def test_escaped_backslash_before_n_is_misread_as_newline():
    # known limitation: valid "\\n" is indistinguishable from a doubled "\n"
    assert collapse_double_escapes(r'{"path": "C:\\new"}') == r'{"path": "C:\new"}'
