"""Static emergency hotlines and warning signs shown alongside safety alerts."""

from pydantic import BaseModel, computed_field


class EmergencyResource(BaseModel):
    title: str
    number: str
    description: str
    urgent: bool = False

    @computed_field
    @property
    def action(self) -> str:
        return "text" if self.number.lower().startswith("text") else "call"

    @property
    def dial_uri(self) -> str | None:
        if self.action != "call":
            return None
        return "tel:" + self.number.replace("-", "")


EMERGENCY_RESOURCES = (
    EmergencyResource(
        title="Emergency Services",
        number="911",
        description="For life-threatening emergencies",
        urgent=True,
    ),
    EmergencyResource(
        title="Poison Control",
        number="1-800-222-1222",
        description="24/7 poison emergency helpline",
    ),
    EmergencyResource(
        title="Postpartum Support",
        number="1-800-944-4773",
        description="Postpartum Support International",
    ),
    EmergencyResource(
        title="Crisis Text Line",
        number="Text HOME to 741741",
        description="Free 24/7 mental health support",
    ),
)

WARNING_SIGNS = (
    "Severe headache that doesn't go away",
    "Changes in vision (blurry, spots, flashing)",
    "Severe abdominal pain",
    "Heavy vaginal bleeding",
    "No fetal movement for extended periods",
    "Sudden swelling of face, hands, or feet",
    "High fever (above 101°F / 38.3°C)",
    "Difficulty breathing",
    "Chest pain",
    "Thoughts of harming yourself or baby",
)
