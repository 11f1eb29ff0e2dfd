"""Per-token sweep engine."""

from relaysweep.sweep.base import (
    Failed,
    GasBudget,
    Sent,
    Summary,
    SweepKind,
    SweepOutcome,
    TokenProcessor,
)
from relaysweep.sweep.fungible import FungibleTokenProcessor
from relaysweep.sweep.gas import GasBudgetCalculator
from relaysweep.sweep.native import NativeTokenProcessor
from relaysweep.sweep.orchestrator import SweepOrchestrator
from relaysweep.sweep.wrap import WrapAdvisor

__all__ = [
    "Failed",
    "FungibleTokenProcessor",
    "GasBudget",
    "GasBudgetCalculator",
    "NativeTokenProcessor",
    "Sent",
    "Summary",
    "SweepKind",
    "SweepOrchestrator",
    "SweepOutcome",
    "TokenProcessor",
    "WrapAdvisor",
]
