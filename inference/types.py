from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Literal

from .schema import ObjectSchema

ModelStatus = Literal["success", "recoverable_error", "fatal_error"]


@dataclass(frozen=True)
class CompletionRequest:
    user_prompt: str
    output_schema: ObjectSchema
    system_instruction: Optional[str] = None

    def __post_init__(self):
        if not (self.user_prompt or "").strip():
            raise ValueError("user_prompt must be non-empty")
        if not isinstance(self.output_schema, ObjectSchema):
            raise ValueError("output_schema must describe a JSON object")


@dataclass(frozen=True)
class ModelCandidate:
    model: str
    provider: str


@dataclass
class ModelRequest:
    model: str
    messages: List[Dict[str, str]]
    json_mode: bool = True
    temperature: float = 0.2
    timeout_s: Optional[float] = 30
    trace_id: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None   # Schema.describe(); informational for backends


@dataclass
class ModelResponse:
    status: ModelStatus
    output: Optional[str] = None
    error_type: Optional[str] = None   # quota_exhausted | model_unavailable | http_error | timeout | network_error
    metadata: Optional[Dict[str, Any]] = None


AttemptStatus = Literal["success", "skip", "fatal"]


@dataclass
class AttemptOutcome:
    """What one candidate attempt means for the fallback loop."""

    status: AttemptStatus
    data: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None


@dataclass
class CompletionResult:
    data: Dict[str, Any]
    model: str
    attempts: int
    skipped: List[Dict[str, Any]] = field(default_factory=list)
