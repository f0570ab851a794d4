"""Symptom groupings and the two alert tag lists."""

from care.schema import SymptomTag

SEVERE_TAGS = frozenset(
    {
        SymptomTag.severe_headache,
        SymptomTag.vision_changes,
        SymptomTag.severe_abdominal_pain,
        SymptomTag.heavy_bleeding,
        SymptomTag.no_fetal_movement,
    }
)

MODERATE_TAGS = frozenset(
    {
        SymptomTag.persistent_vomiting,
        SymptomTag.high_fever,
        SymptomTag.swelling,
        SymptomTag.chest_pain,
    }
)

# one severe tag is enough; moderate tags need company
MODERATE_THRESHOLD = 2

SEVERE_MESSAGE = (
    "Please seek medical attention promptly. "
    "Some of your symptoms may need immediate evaluation."
)
MODERATE_MESSAGE = "Consider reaching out to your healthcare provider to discuss your symptoms."

# Check-in picker groups, in display order.
SYMPTOM_GROUPS = {
    "Physical": [
        SymptomTag.fatigue,
        SymptomTag.nausea,
        SymptomTag.headache,
        SymptomTag.back_pain,
        SymptomTag.cramping,
        SymptomTag.swelling,
        SymptomTag.breast_tenderness,
    ],
    "Digestive": [
        SymptomTag.food_cravings,
        SymptomTag.food_aversion,
        SymptomTag.heartburn,
        SymptomTag.constipation,
        SymptomTag.bloating,
    ],
    "Emotional": [
        SymptomTag.mood_swings,
        SymptomTag.anxiety,
        SymptomTag.irritability,
        SymptomTag.crying_spells,
    ],
    "Sleep": [
        SymptomTag.insomnia,
        SymptomTag.vivid_dreams,
        SymptomTag.frequent_urination,
    ],
    "Concerning (Please note)": [
        SymptomTag.severe_headache,
        SymptomTag.vision_changes,
        SymptomTag.severe_abdominal_pain,
        SymptomTag.heavy_bleeding,
        SymptomTag.no_fetal_movement,
    ],
}


def label_for(tag: SymptomTag | str) -> str:
    """Human label for a tag: ``back_pain`` -> ``Back pain``."""
    value = tag.value if isinstance(tag, SymptomTag) else str(tag)
    return value.replace("_", " ").capitalize()
