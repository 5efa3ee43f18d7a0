"""Capacity planning."""

from .planner import (
    AllocationBatch,
    AllocationOutcome,
    AllocationPlanner,
    CenterLockRegistry,
    PlannerConfig,
    plan_allocation,
)

__all__ = [
    "AllocationBatch",
    "AllocationOutcome",
    "AllocationPlanner",
    "CenterLockRegistry",
    "PlannerConfig",
    "plan_allocation",
]
