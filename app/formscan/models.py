"""
Pydantic models for the feedback form pipeline.

The extraction schema uses the question text printed on the paper form as
its JSON keys, so every field is declared with an alias. Serialize with
``by_alias=True`` to get the wire/document layout.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ["Program", "Program Date", "Name", "Room No"]
PROGRAM_EXPERIENCE_KEY = "Program Experience"
ASHRAM_EXPERIENCE_KEY = "Overall Ashram Experience"


def _coerce_text(value: Any) -> Any:
    """Models sometimes answer ratings and room numbers as bare numbers."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class _FormModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProgramExperience(_FormModel):
    """Ratings for the program itself. Every answer is optional."""

    satisfaction: str | None = Field(default=None, alias="How satisfied are you?")
    feeling_before: str | None = Field(
        default=None, alias="How were you feeling before the program?"
    )
    feeling_after: str | None = Field(
        default=None, alias="How were you feeling after the program?"
    )
    recommendation_likelihood: str | None = Field(
        default=None, alias="How likely would you recommend this program?"
    )

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _coerce_text(v)


class AshramExperience(_FormModel):
    """Ratings for the stay at the ashram. Every answer is optional."""

    housing: str | None = Field(default=None, alias="Housing?")
    hygiene: str | None = Field(default=None, alias="Hygiene and cleanliness?")
    dining: str | None = Field(default=None, alias="Dining Experience?")
    arrangements: str | None = Field(default=None, alias="Program arrangements?")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _coerce_text(v)


class ExtractedForm(_FormModel):
    """
    Fields read off one feedback form.

    Attributes:
        program: Name of the program attended (required).
        program_date: Date of the program as written on the form (required).
        name: Participant name (required).
        room_no: Room number (required).
        program_experience: Program ratings, empty when not filled in.
        ashram_experience: Stay ratings, empty when not filled in.
        suggestions: Free text.
        volunteer_preferences: Free text.
        contribution_interests: Free text.
    """

    program: str = Field(..., min_length=1, alias="Program")
    program_date: str = Field(..., min_length=1, alias="Program Date")
    name: str = Field(..., min_length=1, alias="Name")
    room_no: str = Field(..., min_length=1, alias="Room No")
    program_experience: ProgramExperience = Field(
        default_factory=ProgramExperience,
        alias=PROGRAM_EXPERIENCE_KEY,
    )
    suggestions: str | None = Field(default=None, alias="Suggestions")
    ashram_experience: AshramExperience = Field(
        default_factory=AshramExperience,
        alias=ASHRAM_EXPERIENCE_KEY,
    )
    volunteer_preferences: str | None = Field(
        default=None, alias="Volunteer Preferences"
    )
    contribution_interests: str | None = Field(
        default=None, alias="Contribution Interests"
    )

    @field_validator(
        "program",
        "program_date",
        "name",
        "room_no",
        "suggestions",
        "volunteer_preferences",
        "contribution_interests",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _coerce_text(v)

    @field_validator("program_experience", "ashram_experience", mode="before")
    @classmethod
    def backfill_group(cls, v: Any) -> Any:
        """A missing or blank group becomes an empty one."""
        if v is None or v == "" or v == {}:
            return {}
        return v


class FeedbackRecord(ExtractedForm):
    """An extracted form stamped with its storage metadata."""

    uid: str = Field(..., description="Unique record ID (UUID4)")
    image_url: str = Field(..., alias="imageUrl")
    uploaded_at: str = Field(..., alias="uploadedAt")

    @classmethod
    def from_extraction(
        cls,
        form: ExtractedForm,
        uid: str,
        image_url: str,
        uploaded_at: str,
    ) -> "FeedbackRecord":
        return cls(
            **form.model_dump(),
            uid=uid,
            image_url=image_url,
            uploaded_at=uploaded_at,
        )

    def to_document(self) -> dict[str, Any]:
        """Document layout used for storage and API responses."""
        return self.model_dump(by_alias=True, exclude_none=True)


class UploadResponse(BaseModel):
    """Response model for a successful upload."""

    success: bool = Field(default=True)
    data: dict[str, Any] = Field(..., description="The stored FeedbackRecord")


class RootResponse(BaseModel):
    """Root banner."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")
