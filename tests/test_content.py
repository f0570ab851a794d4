import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from care.catalog import CATALOG
from care.content import select_educational_content, stage_label
from care.schema import ContentStage, EducationalItem, Profile


def _item(item_id, stage, week_range=None):
    return EducationalItem(
        id=item_id,
        title=f"item {item_id}",
        description="",
        applicable_stage=stage,
        week_range=week_range,
        category="self-care",
        icon="*",
    )


def _ids(items):
    return [item.id for item in items]


POSTPARTUM = _item("pp", ContentStage.postpartum)
EVERYONE = _item("all", ContentStage.all)
SECOND_TRIMESTER = _item("t2", ContentStage.pregnancy, (13, 26))


def test_stage_filter():
    catalog = [POSTPARTUM, EVERYONE]
    pregnant = Profile(id="u", maternal_stage="pregnancy", gestational_week=20)
    postpartum = Profile(id="u", maternal_stage="postpartum")
    assert _ids(select_educational_content(pregnant, catalog)) == ["all"]
    assert _ids(select_educational_content(postpartum, catalog)) == ["pp", "all"]


@pytest.mark.parametrize(
    "week, included",
    [(12, False), (13, True), (20, True), (26, True), (27, False), (None, False)],
)
def test_week_range_is_inclusive(week, included):
    profile = Profile(id="u", maternal_stage="pregnancy", gestational_week=week)
    assert (select_educational_content(profile, [SECOND_TRIMESTER]) == [SECOND_TRIMESTER]) is included


def test_all_stage_items_for_any_profile():
    for profile in (
        None,
        Profile(id="u"),
        Profile(id="u", maternal_stage="pre-pregnancy"),
        Profile(id="u", maternal_stage="pregnancy", gestational_week=3),
        Profile(id="u", maternal_stage="postpartum"),
    ):
        assert EVERYONE in select_educational_content(profile, [EVERYONE, POSTPARTUM])


def test_unset_stage_gets_only_general_content():
    assert _ids(select_educational_content(None)) == ["7"]
    assert _ids(select_educational_content(Profile(id="u"))) == ["7"]


def test_builtin_catalog_selection_keeps_order():
    week20 = Profile(id="u", maternal_stage="pregnancy", gestational_week=20)
    no_week = Profile(id="u", maternal_stage="pregnancy")
    assert _ids(select_educational_content(week20)) == ["4", "7", "8"]
    assert _ids(select_educational_content(no_week)) == ["7", "8"]
    assert _ids(select_educational_content(Profile(id="u", maternal_stage="postpartum"))) == ["6", "7"]
    assert _ids(select_educational_content(Profile(id="u", maternal_stage="pre-pregnancy"))) == ["1", "2", "7"]
    assert len(CATALOG) == 8


def test_stage_label():
    assert stage_label(Profile(id="u", maternal_stage="pregnancy", gestational_week=14)) == "Week 14 of pregnancy"
    assert stage_label(Profile(id="u", maternal_stage="pregnancy")) == "Your journey"
    assert stage_label(Profile(id="u", maternal_stage="pre-pregnancy")) == "Preparing for pregnancy"
    assert stage_label(Profile(id="u", maternal_stage="postpartum")) == "Postpartum journey"
    assert stage_label(None) == "Your journey"
