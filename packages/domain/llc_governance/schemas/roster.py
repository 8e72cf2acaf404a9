"""Governance roster: directors, supervisors, managers and other officers.

The roster model only checks identifier shape. Set membership and role
segregation are checked by ``validation.roster.validate_roster`` so every
violation can be reported together.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from .base import DomainModel, OfficerId

_SINGLE_ROLE_FIELDS = (
    "chairperson_id",
    "vice_chairperson_id",
    "manager_id",
    "deputy_manager_id",
    "supervisor_chairperson_id",
    "legal_representative_id",
    "financial_officer_id",
)

# nested key -> flat key, per legacy section
_NESTED_SECTIONS: Dict[str, Dict[str, str]] = {
    "directors": {
        "directorIds": "directorIds",
        "chairpersonId": "chairpersonId",
        "viceChairpersonId": "viceChairpersonId",
    },
    "managers": {
        "managerId": "managerId",
        "deputyManagerId": "deputyManagerId",
    },
    "supervisors": {
        "supervisorIds": "supervisorIds",
        "chairpersonId": "supervisorChairpersonId",
    },
}


class GovernanceRoster(DomainModel):
    """Officer roles of a company.

    Example:
        GovernanceRoster(
            director_ids=["d1", "d2"],
            chairperson_id="d1",
            supervisor_ids=["s1"],
            legal_representative_id="d1",
        )
    """

    director_ids: List[OfficerId] = Field(default_factory=list, description="Board seats, in order")
    chairperson_id: Optional[str] = Field(default=None, description="Board chairperson (a director)")
    vice_chairperson_id: Optional[str] = Field(default=None, description="Vice chairperson (a director)")

    manager_id: Optional[str] = Field(default=None, description="General manager")
    deputy_manager_id: Optional[str] = Field(default=None, description="Deputy manager")

    supervisor_ids: List[OfficerId] = Field(default_factory=list, description="Supervisory seats, in order")
    supervisor_chairperson_id: Optional[str] = Field(
        default=None, description="Chair of the supervisors (a supervisor)"
    )

    legal_representative_id: Optional[str] = Field(
        default=None, description="Legal representative; required by validate_roster"
    )
    financial_officer_id: Optional[str] = Field(default=None, description="Financial officer")

    @model_validator(mode="before")
    @classmethod
    def flatten_nested_sections(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if not any(isinstance(data.get(section), dict) for section in _NESTED_SECTIONS):
            return data
        flat = {k: v for k, v in data.items() if k not in _NESTED_SECTIONS}
        for section, mapping in _NESTED_SECTIONS.items():
            nested = data.get(section)
            if not isinstance(nested, dict):
                continue
            for nested_key, flat_key in mapping.items():
                if nested.get(nested_key) is not None:
                    flat.setdefault(flat_key, nested[nested_key])
        return flat

    @field_validator(*_SINGLE_ROLE_FIELDS, mode="before")
    @classmethod
    def blank_role_is_vacant(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("director_ids", "supervisor_ids", mode="before")
    @classmethod
    def null_list_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def officer_ids(self) -> List[str]:
        """Every distinct person holding some role, in first-seen order."""
        seen: List[str] = []
        candidates = [
            *self.director_ids,
            *self.supervisor_ids,
            *(getattr(self, name) for name in _SINGLE_ROLE_FIELDS),
        ]
        for officer_id in candidates:
            if officer_id and officer_id not in seen:
                seen.append(officer_id)
        return seen


class RosterPolicy(DomainModel):
    """Opt-in roster rules beyond the statutory minimum.

    Every flag defaults to off. ``statutory()`` switches all of them on.
    """

    legal_representative_from_officers: bool = False
    enforce_board_size: bool = False
    require_board_chairperson: bool = False
    distinct_management: bool = False
    strict_supervisor_segregation: bool = False

    @classmethod
    def statutory(cls) -> "RosterPolicy":
        return cls(**{name: True for name in cls.model_fields})

    @classmethod
    def from_settings(cls, settings=None) -> "RosterPolicy":
        """Build the default policy from ``GovernanceSettings``."""
        from ..config import get_settings

        settings = settings or get_settings()
        return cls(**{name: getattr(settings, name) for name in cls.model_fields})


class OfficerDelta(DomainModel):
    """Seats gained and lost between two rosters, in roster order."""

    added_directors: List[str] = Field(default_factory=list)
    removed_directors: List[str] = Field(default_factory=list)
    added_supervisors: List[str] = Field(default_factory=list)
    removed_supervisors: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.added_directors
            or self.removed_directors
            or self.added_supervisors
            or self.removed_supervisors
        )
