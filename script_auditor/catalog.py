import os
from typing import Any, List, Optional

import yaml
from pydantic import ValidationError

from .errors import CatalogError
from .models import ModelInfo

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "catalog.yml")


def _parse_models(raw: Any, path: str) -> List[ModelInfo]:
    entries = raw.get("models") if isinstance(raw, dict) else None
    if not isinstance(entries, list):
        raise CatalogError(f"{path}: expected a top-level 'models' list")
    models: List[ModelInfo] = []
    seen = set()
    for i, entry in enumerate(entries):
        try:
            model = ModelInfo.model_validate(entry)
        except ValidationError as e:
            raise CatalogError(f"{path}: models[{i}] is invalid: {e}") from e
        if model.id in seen:
            raise CatalogError(f"{path}: duplicate model id {model.id!r}")
        seen.add(model.id)
        models.append(model)
    return models


def load_catalog(path: str = DEFAULT_CATALOG_PATH) -> List[ModelInfo]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise CatalogError(f"cannot read model catalog {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"{path}: invalid YAML: {e}") from e
    return _parse_models(raw, path)


def find_model(catalog: List[ModelInfo], model_id: str) -> Optional[ModelInfo]:
    for model in catalog:
        if model.id == model_id:
            return model
    return None


def resolve_model(catalog: List[ModelInfo], model_id: str) -> ModelInfo:
    """Catalog entry for model_id, or default settings for an unlisted id."""
    found = find_model(catalog, model_id)
    if found is not None:
        return found
    return ModelInfo(id=model_id, name=model_id, provider="OpenRouter", context_window=0)
