from __future__ import annotations

from typing import Iterable, List, Optional

from care.catalog import CATALOG
from care.schema import ContentStage, EducationalItem, MaternalStage, Profile


def _applies(item: EducationalItem, profile: Profile) -> bool:
    if item.applicable_stage is ContentStage.all:
        return True
    if item.applicable_stage.value != profile.maternal_stage.value:
        return False
    if item.week_range is not None:
        week = profile.gestational_week
        if week is None:
            return False
        low, high = item.week_range
        return low <= week <= high
    return True


def select_educational_content(
    profile: Optional[Profile],
    catalog: Iterable[EducationalItem] = CATALOG,
) -> List[EducationalItem]:
    """Catalog items relevant to the profile's stage and week, in catalog order."""
    if profile is None or profile.maternal_stage is MaternalStage.unset:
        return [item for item in catalog if item.applicable_stage is ContentStage.all]
    return [item for item in catalog if _applies(item, profile)]


def stage_label(profile: Optional[Profile]) -> str:
    if profile is None:
        return "Your journey"
    stage = profile.maternal_stage
    if stage is MaternalStage.pregnancy and profile.gestational_week:
        return f"Week {profile.gestational_week} of pregnancy"
    if stage is MaternalStage.pre_pregnancy:
        return "Preparing for pregnancy"
    if stage is MaternalStage.postpartum:
        return "Postpartum journey"
    return "Your journey"
