"""Application envelopes and kind-specific payloads.

Payload models check shape only: types, presence, lengths and ranges.
Cross-field rules (ratio sums, roster membership, exclusive pairs) run in
``validation.applications`` so that all violations are reported together.

Keys are camelCase on the wire; snake_case is accepted as well.
"""

from enum import Enum
from typing import Any, Annotated, Dict, List, Optional, Union

from pydantic import AliasChoices, Field, StringConstraints, field_validator, model_validator

from .base import DomainModel, MoneyAmount, OfficerId, PositiveRatio, Reason
from .divisions import DivisionPath
from .parties import PartyReference
from .references import CatalogReference, RegistrationAuthority
from .roster import GovernanceRoster
from .shareholders import Shareholder, VotingRightsMode
from .terms import OperatingTerm
from ..constants import (
    AUTHORITY_NAME_MAX,
    BRAND_NAME_MAX,
    BUSINESS_SCOPE_MAX,
    COMMENT_MAX,
    COMPANY_NAME_MAX,
    COMPANY_NAME_MIN,
    DOMICILE_ADDRESS_MAX,
    INDUSTRY_FEATURE_MAX,
)


# =============================================================================
# Enums
# =============================================================================

class ApplicationKind(str, Enum):
    REGISTRATION = "REGISTRATION"
    CAPITAL_CHANGE = "CAPITAL_CHANGE"
    OFFICER_CHANGE = "OFFICER_CHANGE"
    MANAGEMENT_CHANGE = "MANAGEMENT_CHANGE"
    EQUITY_TRANSFER = "EQUITY_TRANSFER"
    DOMICILE_CHANGE = "DOMICILE_CHANGE"
    RENAME = "RENAME"
    BUSINESS_SCOPE_CHANGE = "BUSINESS_SCOPE_CHANGE"
    DEREGISTRATION = "DEREGISTRATION"


class ApplicationStatus(str, Enum):
    """Lifecycle of an application. The engine only produces SUBMITTED."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class CapitalChangeType(str, Enum):
    INCREASE = "INCREASE"
    DECREASE = "DECREASE"


# =============================================================================
# Type Aliases - Text
# =============================================================================

CompanyName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=COMPANY_NAME_MIN, max_length=COMPANY_NAME_MAX),
]
BrandName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=BRAND_NAME_MAX)]
IndustryFeature = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=INDUSTRY_FEATURE_MAX)
]
AuthorityName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=AUTHORITY_NAME_MAX)
]
DomicileAddress = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=DOMICILE_ADDRESS_MAX)
]
BusinessScope = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=BUSINESS_SCOPE_MAX)
]
Comment = Annotated[str, StringConstraints(strip_whitespace=True, max_length=COMMENT_MAX)]
DivisionId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
DivisionLevel = Annotated[int, Field(ge=1, le=3, description="Administrative division level (1, 2 or 3)")]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


# =============================================================================
# Payload Base
# =============================================================================

class ApplicationPayload(DomainModel):
    """Base class for kind-specific payloads."""

    @field_validator("voting_rights_mode", mode="before", check_fields=False)
    @classmethod
    def default_voting_mode(cls, v: Any) -> Any:
        return VotingRightsMode.BY_CAPITAL_RATIO if v is None else v


# =============================================================================
# Registration
# =============================================================================

class RegistrationPayload(ApplicationPayload):
    """Founding an LLC: identity, domicile, capital, shareholders and officers.

    After validation ``registration_authority``, ``company_type`` and
    ``industry`` hold the resolved references and ``shareholders`` carry
    their effective voting ratios.
    """

    name: CompanyName = Field(description="Registered company name")

    domicile_division_id: DivisionId = Field(description="Administrative division of the domicile")
    domicile_division_path: Optional[DivisionPath] = Field(
        default=None, description="Declared path down to the domicile division"
    )
    administrative_division_level: DivisionLevel
    domicile_address: DomicileAddress

    registered_capital: MoneyAmount
    brand_name: BrandName
    industry_feature: IndustryFeature

    registration_authority_company_id: Optional[str] = None
    registration_authority_name: Optional[AuthorityName] = None

    operating_term: OperatingTerm
    business_scope: BusinessScope

    shareholders: List[Shareholder]
    voting_rights_mode: VotingRightsMode = VotingRightsMode.BY_CAPITAL_RATIO
    roster: GovernanceRoster

    type_code: Optional[str] = None
    type_id: Optional[str] = None
    industry_code: Optional[str] = None
    industry_id: Optional[str] = None

    # Filled in by validate_application
    registration_authority: Optional[RegistrationAuthority] = None
    company_type: Optional[CatalogReference] = None
    industry: Optional[CatalogReference] = None

    @field_validator(
        "registration_authority_company_id",
        "registration_authority_name",
        "type_code",
        "type_id",
        "industry_code",
        "industry_id",
        mode="before",
    )
    @classmethod
    def blank_alternative_is_absent(cls, v: Any) -> Any:
        return _blank_to_none(v)


# =============================================================================
# Capital Change
# =============================================================================

class CapitalChangePayload(ApplicationPayload):
    """New registered capital together with the resulting shareholder set.

    ``current_registered_capital`` is optional; when given, the change
    type is checked without the company state.
    """

    change_type: Optional[CapitalChangeType] = None
    new_registered_capital: MoneyAmount
    current_registered_capital: Optional[MoneyAmount] = None
    shareholders: List[Shareholder]
    voting_rights_mode: VotingRightsMode = VotingRightsMode.BY_CAPITAL_RATIO
    reason: Optional[Reason] = None

    @field_validator("change_type", mode="before")
    @classmethod
    def blank_change_type_is_absent(cls, v: Any) -> Any:
        return _blank_to_none(v)


# =============================================================================
# Officer and Management Changes
# =============================================================================

class OfficerChangePayload(ApplicationPayload):
    """Replacement director and/or supervisor seats.

    ``None`` (or an omitted key) leaves the seats unchanged; an empty list
    clears them.
    """

    director_ids: Optional[List[OfficerId]] = None
    supervisor_ids: Optional[List[OfficerId]] = None
    reason: Optional[Reason] = None


class ManagementChangePayload(ApplicationPayload):
    """Replacement manager, deputy manager and/or financial officer.

    Only keys present in the payload are changed; a null or blank value
    vacates the role.
    """

    manager_id: Optional[str] = None
    deputy_manager_id: Optional[str] = None
    financial_officer_id: Optional[str] = None
    reason: Optional[Reason] = None

    @field_validator("manager_id", "deputy_manager_id", "financial_officer_id", mode="before")
    @classmethod
    def blank_role_is_vacant(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def changed_roles(self) -> List[str]:
        """Role fields the caller supplied, in declaration order."""
        return [
            name
            for name in ("manager_id", "deputy_manager_id", "financial_officer_id")
            if name in self.model_fields_set
        ]


# =============================================================================
# Equity Transfer
# =============================================================================

class EquityTransferPayload(ApplicationPayload):
    """Transfer of capital and voting share from one party to another."""

    transferor: PartyReference
    transferee: PartyReference
    capital_ratio: PositiveRatio = Field(
        validation_alias=AliasChoices("capitalRatio", "ratio", "capital_ratio"),
        serialization_alias="capitalRatio",
        description="Capital share moved to the transferee",
    )
    voting_ratio: PositiveRatio = Field(description="Voting share moved to the transferee")
    comment: Optional[Comment] = None


# =============================================================================
# Profile Changes
# =============================================================================

class DomicileChangePayload(ApplicationPayload):
    """New domicile address and, optionally, a new division.

    A new division needs the registration authority again.
    """

    domicile_address: DomicileAddress
    domicile_division_id: Optional[DivisionId] = None
    domicile_division_path: Optional[DivisionPath] = None
    administrative_division_level: Optional[DivisionLevel] = None
    registration_authority_company_id: Optional[str] = None
    registration_authority_name: Optional[AuthorityName] = None
    reason: Optional[Reason] = None

    registration_authority: Optional[RegistrationAuthority] = None

    @field_validator(
        "domicile_division_id",
        "registration_authority_company_id",
        "registration_authority_name",
        mode="before",
    )
    @classmethod
    def blank_value_is_absent(cls, v: Any) -> Any:
        return _blank_to_none(v)


class RenamePayload(ApplicationPayload):
    new_name: CompanyName
    reason: Optional[Reason] = None


class BusinessScopeChangePayload(ApplicationPayload):
    business_scope: BusinessScope
    reason: Optional[Reason] = None


class DeregistrationPayload(ApplicationPayload):
    reason: Optional[Reason] = None


PAYLOAD_MODELS: Dict[str, type] = {
    ApplicationKind.REGISTRATION.value: RegistrationPayload,
    ApplicationKind.CAPITAL_CHANGE.value: CapitalChangePayload,
    ApplicationKind.OFFICER_CHANGE.value: OfficerChangePayload,
    ApplicationKind.MANAGEMENT_CHANGE.value: ManagementChangePayload,
    ApplicationKind.EQUITY_TRANSFER.value: EquityTransferPayload,
    ApplicationKind.DOMICILE_CHANGE.value: DomicileChangePayload,
    ApplicationKind.RENAME.value: RenamePayload,
    ApplicationKind.BUSINESS_SCOPE_CHANGE.value: BusinessScopeChangePayload,
    ApplicationKind.DEREGISTRATION.value: DeregistrationPayload,
}

AnyPayload = Union[
    RegistrationPayload,
    CapitalChangePayload,
    OfficerChangePayload,
    ManagementChangePayload,
    EquityTransferPayload,
    DomicileChangePayload,
    RenamePayload,
    BusinessScopeChangePayload,
    DeregistrationPayload,
]


# =============================================================================
# Envelope
# =============================================================================

class NormalizedApplication(DomainModel):
    """A validated application, ready for review and for the differ."""

    kind: ApplicationKind
    status: ApplicationStatus = ApplicationStatus.SUBMITTED
    payload: AnyPayload

    @model_validator(mode="before")
    @classmethod
    def parse_payload_for_kind(cls, data: Any) -> Any:
        # The payload shape is selected by kind, not guessed from its keys.
        if isinstance(data, dict) and isinstance(data.get("payload"), dict):
            kind = data.get("kind")
            kind = kind.value if isinstance(kind, Enum) else kind
            model = PAYLOAD_MODELS.get(kind)
            if model is not None:
                data = {**data, "payload": model.model_validate(data["payload"])}
        return data

    @model_validator(mode="after")
    def validate_payload_matches_kind(self) -> "NormalizedApplication":
        expected = PAYLOAD_MODELS[self.kind]
        if type(self.payload) is not expected:
            raise ValueError(f"{self.kind} application needs a {expected.__name__} payload")
        return self
