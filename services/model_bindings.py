"""Bind gateway-backed generators into the model registry."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Type

from pydantic import BaseModel

from config.registry import FEEDBACK_KEY, QUESTIONS_KEY, bind_model
from config.routes import load_app_registry
from feedback.models import FeedbackDraft
from llm_gateway import as_model
from question_gen.models import GeneratedQuestions


logger = logging.getLogger(__name__)

MODEL_SCHEMAS: Dict[str, Type[BaseModel]] = {
    FEEDBACK_KEY: FeedbackDraft,
    QUESTIONS_KEY: GeneratedQuestions,
}


def bind_llm_models(config_path: Path) -> List[str]:
    """Bind every generator key to its configured LLM route.

    Returns the bound keys; an absent config file binds nothing so callers
    (or tests) can supply their own callables.
    """

    if not config_path.exists():
        logger.warning("LLM config %s not found; generators left unbound", config_path)
        return []
    registry = load_app_registry(config_path, MODEL_SCHEMAS)
    for key, (route, schema) in registry.items():
        bind_model(key, as_model(route, schema))
        logger.info("Bound %s to route=%s model=%s", key, route.name, route.model)
    return sorted(registry)


__all__ = ["MODEL_SCHEMAS", "bind_llm_models"]
