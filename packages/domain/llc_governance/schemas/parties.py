"""Party references: the tagged identity of a shareholder or transfer party.

A party is either a natural person or another company. The ``kind`` tag
selects which identifier must be present; the other must be absent.

Legacy payloads use ``USER``/``COMPANY`` tags with ``userId``/``companyId``
keys. Both spellings are accepted and normalised on construction.
"""

from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .base import DomainModel


class PartyKind(str, Enum):
    PERSON = "PERSON"
    ORGANIZATION = "ORGANIZATION"


_LEGACY_KINDS = {"USER": PartyKind.PERSON.value, "COMPANY": PartyKind.ORGANIZATION.value}


# =============================================================================
# Party Reference
# =============================================================================

class PartyReference(DomainModel):
    """Reference to a natural person or an organization.

    Hashable and compared by value, so it can key voting maps and be
    matched against the company's live shareholder set.

    Example:
        PartyReference.person("u1")
        PartyReference(kind="COMPANY", companyId="c9")  # legacy spelling
    """

    kind: PartyKind = Field(description="PERSON or ORGANIZATION")

    person_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("personId", "userId", "person_id"),
        serialization_alias="personId",
        description="Identifier of the natural person (kind=PERSON only)",
    )

    organization_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("organizationId", "companyId", "organization_id"),
        serialization_alias="organizationId",
        description="Identifier of the organization (kind=ORGANIZATION only)",
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_kind_tag(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("kind"), str):
            return data
        raw = data["kind"]
        tag = raw.strip().upper()
        tag = _LEGACY_KINDS.get(tag, tag)
        if tag not in PartyKind.__members__:
            raise PydanticCustomError(
                "invalid_reference_kind",
                "unknown party kind '{kind}'",
                {"kind": raw},
            )
        return {**data, "kind": tag}

    @field_validator("person_id", "organization_id", mode="before")
    @classmethod
    def blank_id_is_absent(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @model_validator(mode="after")
    def validate_identifier_matches_kind(self) -> "PartyReference":
        """Exactly the identifier selected by ``kind`` must be set."""
        if self.kind == PartyKind.PERSON:
            expected, other = self.person_id, self.organization_id
        else:
            expected, other = self.organization_id, self.person_id
        if expected is None or other is not None:
            raise PydanticCustomError(
                "invalid_reference_kind",
                "a {kind} reference needs exactly its own identifier",
                {"kind": self.kind},
            )
        return self

    @classmethod
    def person(cls, person_id: str) -> "PartyReference":
        return cls(kind=PartyKind.PERSON, person_id=person_id)

    @classmethod
    def organization(cls, organization_id: str) -> "PartyReference":
        return cls(kind=PartyKind.ORGANIZATION, organization_id=organization_id)

    @property
    def party_id(self) -> str:
        return self.person_id if self.kind == PartyKind.PERSON else self.organization_id

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.kind, self.party_id)

    @property
    def key(self) -> str:
        """Compact display key, e.g. ``PERSON:u1``."""
        return f"{self.kind}:{self.party_id}"

    def __str__(self) -> str:
        return self.key
