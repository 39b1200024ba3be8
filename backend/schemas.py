"""
Pydantic schemas for telemetry snapshots and request/response validation.

Clients send camelCase keys; every model also accepts the snake_case field
names so snapshots can be built directly in Python.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Union


class _Snapshot(BaseModel):
    """Base for immutable telemetry records. Non-finite numbers are rejected."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, allow_inf_nan=False)


class InteractionPoint(_Snapshot):
    """A single pointer sample."""
    x: float
    y: float
    timestamp: int


class MouseMove(InteractionPoint):
    """Shooter pointer sample, optionally carrying a client-derived speed."""
    speed: Optional[float] = None


class Stroke(_Snapshot):
    """One continuous pointer-down to pointer-up drawing gesture."""
    id: Union[int, str] = 0
    points: List[InteractionPoint] = Field(..., min_length=1)
    brush_size: float = Field(default=5.0, alias="brushSize", ge=0)
    brush_color: str = Field(default="#000000", alias="brushColor")
    start_time: int = Field(..., alias="startTime")
    end_time: Optional[int] = Field(default=None, alias="endTime")


class CanvasDimensions(_Snapshot):
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class DrawingData(_Snapshot):
    """Finished drawing exported by the canvas."""
    strokes: List[Stroke] = Field(default_factory=list)
    dimensions: CanvasDimensions


class InteractionEvent(_Snapshot):
    """A discrete UI interaction (undo, clear, tool change...)."""
    type: str
    timestamp: int
    data: Dict[str, Any] = Field(default_factory=dict)


class DrawingAnalytics(_Snapshot):
    """Telemetry recorded during one drawing session."""
    start_time: Optional[int] = Field(default=None, alias="startTime")
    strokes: List[Stroke] = Field(default_factory=list)
    mouse_moves: List[InteractionPoint] = Field(default_factory=list, alias="mouseMoves")
    interactions: List[InteractionEvent] = Field(default_factory=list)
    end_time: Optional[int] = Field(default=None, alias="endTime")


class ShooterAnalytics(_Snapshot):
    """Telemetry recorded during one shooter game."""
    shots: int = Field(default=0, ge=0)
    hits: int = Field(default=0, ge=0)
    mouse_moves: List[MouseMove] = Field(default_factory=list, alias="mouseMoves")
    click_times: List[int] = Field(default_factory=list, alias="clickTimes")
    reaction_times: List[int] = Field(default_factory=list, alias="reactionTimes")
    start_time: Optional[int] = Field(default=None, alias="startTime")
    end_time: Optional[int] = Field(default=None, alias="endTime")

    @model_validator(mode="after")
    def hits_not_above_shots(self):
        if self.hits > self.shots:
            raise ValueError("hits cannot exceed shots")
        return self


class VerifyRequest(BaseModel):
    """Request payload for /verify endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    analytics: Optional[ShooterAnalytics] = None
    game_type: str = Field(default="shooter", alias="gameType", max_length=50)
    score: int = Field(default=0, ge=0)


class DrawingVerifyRequest(BaseModel):
    """Request payload for /verify/drawing endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    drawing_data: Optional[DrawingData] = Field(default=None, alias="drawingData")
    prompt: str = Field(default="", max_length=200)
    analytics: Optional[DrawingAnalytics] = None

    @field_validator("prompt")
    @classmethod
    def prompt_stripped(cls, v):
        return v.strip()


class VerificationInfo(BaseModel):
    is_human: bool
    score: int
    confidence: str
    recommendation: str
    session_id: str
    timestamp: str


class VerifyResponse(BaseModel):
    """Response payload for /verify endpoints."""
    success: bool
    verification: VerificationInfo
    analytics: Dict[str, Any]


class AnalyticsEventRequest(BaseModel):
    """Request payload for POST /analytics."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId", max_length=255)
    event_type: Optional[str] = Field(default=None, alias="eventType", max_length=100)
    data: Optional[Dict[str, Any]] = None
    timestamp: Optional[int] = None


class AnalyticsEventResponse(BaseModel):
    success: bool
    event_id: str


class ChallengeResponse(BaseModel):
    """Response for /challenge/{game_type}."""
    session_id: str
    game_type: str
    prompt: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)
