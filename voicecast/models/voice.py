"""Provider reference data: voices and account usage."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import UsageLevel


class VoiceLabels(BaseModel):
    """Descriptive labels attached to a voice."""

    model_config = ConfigDict(extra="allow")

    gender: Optional[str] = None
    age: Optional[str] = None
    accent: Optional[str] = None


class Voice(BaseModel):
    """A voice available to the current credential. Read-only."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    voice_id: str
    name: str
    preview_url: Optional[str] = None
    category: Optional[str] = None
    labels: Optional[VoiceLabels] = None
    description: Optional[str] = None

    @property
    def label_summary(self) -> str:
        """Short "gender · age · accent" summary, empty when unlabeled."""
        if not self.labels:
            return ""
        parts = [self.labels.gender, self.labels.age, self.labels.accent]
        return " · ".join(p for p in parts if p)


class UsageStats(BaseModel):
    """Character quota usage for the current subscription."""

    character_count: int = Field(ge=0)
    character_limit: int = Field(ge=0)
    can_extend_limit: bool = False

    @property
    def remaining_characters(self) -> int:
        return self.character_limit - self.character_count

    @property
    def usage_ratio(self) -> float:
        if self.character_limit == 0:
            return 1.0
        return self.character_count / self.character_limit

    @property
    def level(self) -> UsageLevel:
        ratio = self.usage_ratio
        if ratio > 0.9:
            return UsageLevel.CRITICAL
        if ratio > 0.7:
            return UsageLevel.WARNING
        return UsageLevel.OK
