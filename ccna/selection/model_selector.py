"""Assign catalog models to the four Claude Code roles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ccna.agents.models_client import Model
from ccna.storage.config_store import Config

LOGGER = logging.getLogger(__name__)

Choice = Tuple[str, str]
# ask(message, [(label, value), ...], default_value) -> chosen value
AskChoice = Callable[[str, Sequence[Choice], str], str]

CATEGORIES = ("opus", "sonnet", "haiku")

ROLE_PROMPTS = {
    "opus": "Select Opus model (used for opus, or opusplan while plan mode is active)",
    "sonnet": "Select Sonnet model (used for sonnet, or opusplan while plan mode is inactive)",
    "haiku": "Select Haiku model (used for haiku and background features)",
    "subagent": "Select subagent model",
}


class EmptyCatalogError(RuntimeError):
    """Raised when the endpoint returned no models to choose from."""


@dataclass
class RoleAssignment:
    opusModel: str
    sonnetModel: str
    haikuModel: str
    subagentModel: str

    @classmethod
    def roles(cls) -> Tuple[str, ...]:
        return ("opus", "sonnet", "haiku", "subagent")

    def get(self, role: str) -> str:
        return getattr(self, f"{role}Model")


def categorize_models(model_ids: Iterable[str]) -> Dict[str, List[str]]:
    """Group ids by case-insensitive substring; the first matching family wins."""

    categories: Dict[str, List[str]] = {name: [] for name in (*CATEGORIES, "other")}
    for model_id in model_ids:
        lowered = model_id.lower()
        family = next((name for name in CATEGORIES if name in lowered), "other")
        categories[family].append(model_id)
    return categories


def describe_catalog(models: Sequence[Model]) -> List[str]:
    labels = {model.id: model.label for model in models}
    lines: List[str] = []
    for family, ids in categorize_models(model.id for model in models).items():
        if not ids:
            continue
        lines.append(f"{family.capitalize()}:")
        lines.extend(f"  - {labels[model_id]}" for model_id in ids)
    return lines


def default_choices(models: Sequence[Model], previous: Optional[Config] = None) -> RoleAssignment:
    """Preselect a model per role.

    A previous value wins while it is still in the catalog. Otherwise every
    role falls back to the first model, except subagent which takes the
    second one when there is one.
    """

    if not models:
        raise EmptyCatalogError("No models available to choose from")
    available = {model.id for model in models}
    first = models[0].id
    fallback = {role: first for role in RoleAssignment.roles()}
    fallback["subagent"] = models[1].id if len(models) > 1 else first

    chosen = {}
    for role in RoleAssignment.roles():
        key = f"{role}Model"
        prior = getattr(previous, key) if previous is not None else None
        if prior and prior in available:
            chosen[key] = prior
        else:
            if prior:
                LOGGER.info("Previous %s model %r is no longer offered", role, prior)
            chosen[key] = fallback[role]
    return RoleAssignment(**chosen)


def select_roles(
    models: Sequence[Model],
    ask: AskChoice,
    previous: Optional[Config] = None,
) -> RoleAssignment:
    """Ask for each role in turn; any model may be bound to any role."""

    if not models:
        raise EmptyCatalogError("Could not get the model list, check the endpoint URL and API key")
    defaults = default_choices(models, previous)
    choices = [(model.label, model.id) for model in models]
    picked = {
        f"{role}Model": ask(ROLE_PROMPTS[role], choices, defaults.get(role))
        for role in RoleAssignment.roles()
    }
    return RoleAssignment(**picked)
