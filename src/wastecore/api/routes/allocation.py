"""Resource allocation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...schemas.allocation import AllocationResponse, CenterAllocationModel
from ...services.capacity import AllocationOutcome, AllocationPlanner
from ..deps import get_allocation_planner

router = APIRouter(prefix="/allocation", tags=["allocation"])


def _to_model(outcome: AllocationOutcome) -> CenterAllocationModel:
    return CenterAllocationModel(
        center_id=outcome.center_id,
        center_name=outcome.center_name,
        trucks_allocated=outcome.trucks_allocated,
        staff_allocated=outcome.staff_allocated,
        total_quantity=outcome.total_quantity,
        error=outcome.error,
    )


@router.post("/allocate-resources", response_model=AllocationResponse, status_code=status.HTTP_200_OK)
def allocate_resources(
    response: Response,
    planner: AllocationPlanner = Depends(get_allocation_planner),
) -> AllocationResponse:
    """Recompute trucks and staff for every center.

    Returns 207 when some centers failed and others were updated, 503 when
    every center failed.
    """
    batch = planner.allocate_all()
    if batch.failed:
        response.status_code = status.HTTP_207_MULTI_STATUS if batch.succeeded else status.HTTP_503_SERVICE_UNAVAILABLE
        message = f"Resources allocated for {len(batch.succeeded)} of {len(batch.results)} centers."
    else:
        message = "Resources allocated."
    return AllocationResponse(
        message=message,
        centers=[_to_model(item) for item in batch.succeeded],
        failed=[_to_model(item) for item in batch.failed],
    )
