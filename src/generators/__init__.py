"""Interpretation generator backends."""

from .base import InterpretationGenerator
from .bedrock import BedrockInterpretationGenerator
from .command import CommandInterpretationGenerator
from .fixture import FixtureInterpretationGenerator

__all__ = [
    "InterpretationGenerator",
    "BedrockInterpretationGenerator",
    "CommandInterpretationGenerator",
    "FixtureInterpretationGenerator",
]
