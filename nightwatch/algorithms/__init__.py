"""Agent movement and threat rules."""

from .movement import AgentController, DESTINATION_POLICIES, choose_destination
from .threat import Breach, ThreatEvaluator

__all__ = [
    "AgentController",
    "DESTINATION_POLICIES",
    "choose_destination",
    "Breach",
    "ThreatEvaluator",
]
