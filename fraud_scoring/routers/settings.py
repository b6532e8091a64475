from fastapi import APIRouter, Depends

from fraud_scoring.models.settings import ScoringSettings, ScoringSettingsUpdate
from fraud_scoring.repositories import SettingsRepository
from fraud_scoring.routers.dependencies import get_settings_repository

router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=ScoringSettings)
async def get_settings(repo: SettingsRepository = Depends(get_settings_repository)) -> ScoringSettings:
    return repo.get()


@router.put("/settings", response_model=ScoringSettings)
async def update_settings(
    updates: ScoringSettingsUpdate,
    repo: SettingsRepository = Depends(get_settings_repository),
) -> ScoringSettings:
    """Update one or both auto-action thresholds; applies to the next submission."""
    return repo.update(updates)
