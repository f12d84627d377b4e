import pytest

from script_auditor.catalog import find_model, load_catalog, resolve_model
from script_auditor.errors import CatalogError


def test_default_catalog_loads():
    catalog = load_catalog()
    ids = [m.id for m in catalog]
    assert "google/gemini-flash-1.5" in ids
    assert len(ids) == len(set(ids))
    assert all(m.max_tokens > 0 for m in catalog)


def test_claude_sampling_settings():
    claude = find_model(load_catalog(), "anthropic/claude-3-sonnet-20240229")
    assert claude is not None
    assert claude.paid
    assert claude.temperature == 0.4
    assert claude.top_p == 0.3


def test_camel_case_dump():
    model = find_model(load_catalog(), "google/gemini-flash-1.5")
    dumped = model.model_dump(by_alias=True, exclude_none=True)
    assert dumped["contextWindow"] == 16384
    assert dumped["maxTokens"] == 2048
    assert "temperature" not in dumped


def test_duplicate_ids_rejected(tmp_path):
    path = tmp_path / "catalog.yml"
    entry = "  - {id: a/b, name: A, provider: X, context_window: 10}\n"
    path.write_text("models:\n" + entry + entry, encoding="utf-8")
    with pytest.raises(CatalogError, match="duplicate"):
        load_catalog(str(path))


def test_invalid_entry_rejected(tmp_path):
    path = tmp_path / "catalog.yml"
    path.write_text("models:\n  - {id: a/b, name: A}\n", encoding="utf-8")
    with pytest.raises(CatalogError, match=r"models\[0\]"):
        load_catalog(str(path))


@pytest.mark.parametrize("content", ["", "models: nope\n", "- just a list\n"])
def test_missing_models_list_rejected(tmp_path, content):
    path = tmp_path / "catalog.yml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(str(path))


def test_unreadable_and_malformed_files(tmp_path):
    with pytest.raises(CatalogError, match="cannot read"):
        load_catalog(str(tmp_path / "missing.yml"))
    path = tmp_path / "bad.yml"
    path.write_text("models: [\n", encoding="utf-8")
    with pytest.raises(CatalogError, match="invalid YAML"):
        load_catalog(str(path))


def test_resolve_unlisted_model_uses_defaults():
    model = resolve_model([], "acme/new-model")
    assert model.id == "acme/new-model"
    assert model.max_tokens == 4000
    assert model.temperature is None
