"""Exclusion note payload."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Exclusion(BaseModel):
    """Measures excused at one revision, as stored in an exclusion note."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    measure: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("measure", "Measure"),
        description="Names of measures allowed to regress",
    )
    explanation: str | None = Field(
        default=None,
        validation_alias=AliasChoices("explanation", "Explanation"),
        description="Why the regression is accepted",
    )
