"""Operating term of a company: indefinite or a bounded number of years."""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from .base import DomainModel
from ..constants import MAX_OPERATING_YEARS, MIN_OPERATING_YEARS


class IndefiniteTerm(DomainModel):
    """Company operates without an end date.

    ``LONG_TERM`` is the legacy tag for the same thing. A ``years`` value
    sent alongside is ignored.
    """

    type: Literal["INDEFINITE", "LONG_TERM"] = Field(
        default="INDEFINITE",
        description="Discriminator; LONG_TERM is normalised to INDEFINITE",
    )

    @field_validator("type")
    @classmethod
    def normalize_legacy_tag(cls, v: str) -> str:
        return "INDEFINITE"


class FixedTerm(DomainModel):
    """Company operates for a fixed number of years."""

    type: Literal["YEARS"] = "YEARS"

    years: Optional[int] = Field(
        default=None,
        validate_default=True,
        description=f"Operating years in [{MIN_OPERATING_YEARS}, {MAX_OPERATING_YEARS}]",
    )

    @field_validator("years")
    @classmethod
    def validate_years(cls, v: Optional[int]) -> int:
        # Out-of-range counts are reported like an absent value.
        if v is None or not MIN_OPERATING_YEARS <= v <= MAX_OPERATING_YEARS:
            raise PydanticCustomError(
                "missing_required_field",
                "a YEARS term needs years between {low} and {high}",
                {"low": MIN_OPERATING_YEARS, "high": MAX_OPERATING_YEARS},
            )
        return v


OperatingTerm = Annotated[
    Union[IndefiniteTerm, FixedTerm],
    Field(discriminator="type"),
]
