from __future__ import annotations

from fastapi import APIRouter, Depends

from achievements.config import Settings
from achievements.dependencies import get_settings, get_store, require_admin_token
from achievements.repository import SchoolStore
from achievements.services.catalog import BADGE_CATALOG
from achievements.services.evaluation import run_badge_check_from_settings

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get("/catalog", name="badges.catalog")
def list_catalog():
    return [definition.model_dump(mode="json") for definition in BADGE_CATALOG]


@router.post("/run", name="badges.run", dependencies=[Depends(require_admin_token)])
async def run_badges(
    store: SchoolStore = Depends(get_store),
    config: Settings = Depends(get_settings),
):
    """Run the daily badge check now. Meant for the external scheduler."""
    summary = await run_badge_check_from_settings(store, config)
    return {
        "academic_year_id": summary.academic_year_id,
        "processed": summary.processed,
        "succeeded": summary.succeeded,
        "failed": summary.failed,
        "awarded": summary.awarded,
    }
