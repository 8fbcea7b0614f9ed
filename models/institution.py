"""Datenmodell für eine Einrichtung (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, Field

from config.schema import GradingScaleConfig


class Institution(BaseModel):
    """Eine Schule mit eigener Notenskala."""

    id: str
    name: str
    scale: GradingScaleConfig = Field(default_factory=GradingScaleConfig)
    logo: Optional[str] = None
