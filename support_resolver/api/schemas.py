from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator


class AskRequest(BaseModel):
    """Request model for the ask endpoint."""
    question: str = Field(default="", description="User's question")

    @field_validator("question", mode="before")
    @classmethod
    def coerce_to_text(cls, value: Any) -> str:
        # Missing, null or empty values become "", anything else is stringified
        if not value:
            return ""
        if isinstance(value, bool):
            return "true"
        return value if isinstance(value, str) else str(value)


class Source(BaseModel):
    question: str
    category: str


class AskResponse(BaseModel):
    answer: str
    policy: Optional[str] = Field(None, description="Id of the strict policy that answered, if any")
    method: Optional[str] = Field(None, description="How the policy was detected")
    matched_sources: List[Source] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    embeddings_ready: bool
    faq_total: int
    faq_embedded: int
    policy_total: int
    policy_embedded: int
    failures: int
