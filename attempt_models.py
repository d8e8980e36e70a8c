# attempt_models.py

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AttemptCreate(BaseModel):
    """Body of POST /attempts (camelCase on the wire)."""

    shape: str = Field(min_length=1)
    attention_score: int = Field(alias="attentionScore", ge=0, le=100)
    precision_score: int = Field(alias="precisionScore", ge=0, le=100)
    assistance_count: int = Field(alias="assistanceCount", ge=0)
    duration_ms: int = Field(alias="durationMs", ge=0)

    # Validated by wire name only
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "shape": "Square",
                "attentionScore": 100,
                "precisionScore": 100,
                "assistanceCount": 2,
                "durationMs": 15000,
            }
        },
    )


class Attempt(AttemptCreate):
    """Stored attempt; id and completion time are assigned by the store."""

    id: int
    completed_at: datetime = Field(alias="completedAt")
