"""Built-in educational catalog. Bump ``CATALOG_VERSION`` when entries change."""

from care.schema import ContentCategory, ContentStage, EducationalItem

CATALOG_VERSION = "2024.1"

CATALOG: tuple[EducationalItem, ...] = (
    EducationalItem(
        id="1",
        title="Preparing Your Body",
        description="Essential vitamins and nutrients for conception",
        applicable_stage=ContentStage.pre_pregnancy,
        category=ContentCategory.nutrition,
        icon="🥗",
    ),
    EducationalItem(
        id="2",
        title="Gentle Movement",
        description="Safe exercises to boost fertility and wellbeing",
        applicable_stage=ContentStage.pre_pregnancy,
        category=ContentCategory.exercise,
        icon="🧘‍♀️",
    ),
    EducationalItem(
        id="3",
        title="First Trimester Tips",
        description="What to expect in weeks 1-12",
        applicable_stage=ContentStage.pregnancy,
        week_range=(1, 12),
        category=ContentCategory.baby_development,
        icon="🌱",
    ),
    EducationalItem(
        id="4",
        title="Growing Together",
        description="Your baby's development in weeks 13-26",
        applicable_stage=ContentStage.pregnancy,
        week_range=(13, 26),
        category=ContentCategory.baby_development,
        icon="🦋",
    ),
    EducationalItem(
        id="5",
        title="Preparing for Birth",
        description="Getting ready for the big day",
        applicable_stage=ContentStage.pregnancy,
        week_range=(27, 42),
        category=ContentCategory.self_care,
        icon="🌸",
    ),
    EducationalItem(
        id="6",
        title="Postpartum Recovery",
        description="Caring for yourself after birth",
        applicable_stage=ContentStage.postpartum,
        category=ContentCategory.self_care,
        icon="💖",
    ),
    EducationalItem(
        id="7",
        title="Mental Wellness",
        description="Nurturing your emotional health",
        applicable_stage=ContentStage.all,
        category=ContentCategory.mental_health,
        icon="🧠",
    ),
    EducationalItem(
        id="8",
        title="Nutrition Guide",
        description="Eating well for you and baby",
        applicable_stage=ContentStage.pregnancy,
        category=ContentCategory.nutrition,
        icon="🍎",
    ),
)
