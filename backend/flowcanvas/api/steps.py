"""Step metadata API routes."""

from fastapi import APIRouter, HTTPException, Query

from flowcanvas.catalog import STEP_DOCS, check_compatibility, get_step_doc, palette
from flowcanvas.catalog.network import NETWORK_OPTIONS
from flowcanvas.models import Network, NetworkCompatibility, PaletteCategory, StepDoc

router = APIRouter()


@router.get("/steps")
async def list_steps() -> list[StepDoc]:
    """List the documentation of every documented step type."""
    return list(STEP_DOCS.values())


@router.get("/steps/palette")
async def get_palette() -> list[PaletteCategory]:
    """Get the "add next step" menu grouped by category."""
    return palette()


@router.get("/steps/{step_type}")
async def get_step(step_type: str) -> StepDoc:
    """Get the documentation of one step type."""
    doc = get_step_doc(step_type)
    if doc is None:
        raise HTTPException(status_code=404, detail=f"Step type '{step_type}' not documented")
    return doc


@router.get("/networks/{network}/compatibility")
async def get_network_compatibility(
    network: Network,
    types: list[str] = Query(default=[], description="Step types to check"),
) -> NetworkCompatibility:
    """Report which of the given step types will fail on a network."""
    return check_compatibility(types, network)


@router.get("/networks")
async def list_networks() -> list[dict[str, str]]:
    """List the networks a workflow can run against."""
    return NETWORK_OPTIONS
