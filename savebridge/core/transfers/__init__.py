from core.transfers.orchestrator import TransferOrchestrator
from core.transfers.transfer_models import (
    CopyFailure,
    CopyOperation,
    TransferOptions,
    TransferPlan,
    TransferResult,
    TransferState,
)
from core.transfers.transfer_service import build_plan, plan_copy_operations, route_destination

__all__ = [
    "CopyFailure",
    "CopyOperation",
    "TransferOptions",
    "TransferOrchestrator",
    "TransferPlan",
    "TransferResult",
    "TransferState",
    "build_plan",
    "plan_copy_operations",
    "route_destination",
]
