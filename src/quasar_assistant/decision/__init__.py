"""Decision models: the backends that choose what agents do.

This package provides the DecisionModel protocol and two interchangeable
implementations: an Ollama-backed model and a scripted, deterministic model.
"""

from quasar_assistant.decision.base import (
    USE_PRIMARY_CHANNEL,
    ActionSelection,
    Decision,
    DecisionModel,
    ResponseMode,
)
from quasar_assistant.decision.ollama_model import OllamaDecisionModel
from quasar_assistant.decision.scripted import DecideCall, ScriptedDecisionModel, select

__all__ = [
    "USE_PRIMARY_CHANNEL",
    "ActionSelection",
    "DecideCall",
    "Decision",
    "DecisionModel",
    "OllamaDecisionModel",
    "ResponseMode",
    "ScriptedDecisionModel",
    "select",
]
