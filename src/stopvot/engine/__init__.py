"""VOT extraction engine: template matching, vowels, components, decisions."""

from stopvot.engine.decision import BoundaryPair, VotBranch, VotDecision, decide
from stopvot.engine.locator import StopComponents, locate_components
from stopvot.engine.templates import (
    PHONE_LABELS,
    PhoneTemplate,
    label_sequence,
    matches_any,
    matching_templates,
)
from stopvot.engine.vowels import FlankingVowel, FlankingVowels, resolve_flanking_vowels

__all__ = [
    "PHONE_LABELS",
    "BoundaryPair",
    "FlankingVowel",
    "FlankingVowels",
    "PhoneTemplate",
    "StopComponents",
    "VotBranch",
    "VotDecision",
    "decide",
    "label_sequence",
    "locate_components",
    "matches_any",
    "matching_templates",
    "resolve_flanking_vowels",
]
