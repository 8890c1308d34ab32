"""
Pydantic models for the voice assistant API requests and responses.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any, List


class UtteranceRequest(BaseModel):
    """A finalized utterance from the front end's speech recognizer."""
    text: str = Field(description="Transcribed utterance")

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value


class UtteranceResponse(BaseModel):
    """Acknowledgement for a queued utterance."""
    queued: bool
    pending: int = Field(description="Utterances waiting to be processed")


class ActionLogItem(BaseModel):
    timestamp: str
    description: str
    success: bool


class StatusResponse(BaseModel):
    """Snapshot of the assistant and the storefront state it drives."""
    listener_state: str = Field(description="idle, listening, processing or restarting")
    recovery_counter: int = Field(description="Consecutive failures since the last success")
    action_log: List[ActionLogItem] = Field(default_factory=list, description="Most recent commands, oldest first")
    last_status: Optional[str] = Field(default=None, description="Latest status line shown to the user")
    filters: Dict[str, Any] = Field(default_factory=dict, description="Current filter selection")
    profile: Dict[str, Any] = Field(default_factory=dict, description="User profile with payment fields masked")
    page: str = Field(description="Current page path")


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    service: str
    version: str
    config: Dict[str, Any]
