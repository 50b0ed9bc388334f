from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from typing import Any, List, Optional, Union

# --- Inbound ---

class InterviewRequest(BaseModel):
    """
    Body of ``POST /api/vapi/generate``.

    Every field is required and strictly typed: a quoted number is not a number
    and a boolean is not a number. Unknown fields are ignored.
    """
    model_config = ConfigDict(strict=True, extra='ignore')

    type: StrictStr = Field(..., description="Focus of the interview, e.g. 'technical' or 'behavioural'.")
    role: StrictStr = Field(..., description="The job role, e.g. 'Backend Engineer'.")
    level: StrictStr = Field(..., description="Seniority level, e.g. 'Senior'.")
    techstack: StrictStr = Field(..., description="Comma-separated technology names.")
    amount: Union[StrictInt, StrictFloat] = Field(..., description="Number of questions requested.")
    userid: StrictStr = Field(..., description="Opaque identifier of the requesting user.")

# --- Persisted ---

class Interview(BaseModel):
    """Interview record as stored in the Firestore 'interviews' collection."""
    model_config = ConfigDict(populate_by_name=True)

    role: str
    type: str
    level: str
    techstack: List[str] = Field(default_factory=list)
    questions: List[str] = Field(default_factory=list)
    user_id: str = Field(..., alias="userId")
    finalized: bool = True
    cover_image: str = Field(..., alias="coverImage")
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 UTC timestamp.")

    def to_document(self) -> dict:
        """Firestore document with the camelCase field names the frontend reads."""
        return self.model_dump(by_alias=True)

# --- Responses ---

class GenerateInterviewResponse(BaseModel):
    success: bool = True
    questionsCount: int


class HealthCheckResponse(BaseModel):
    success: bool = True
    data: str = "Thank you!"


class ErrorResponse(BaseModel):
    """Shape of every failure body. Only the fields relevant to the error kind are present."""
    success: bool = False
    error: str
    details: Optional[str] = None
    received: Optional[Any] = None
    rawResponse: Optional[str] = None
