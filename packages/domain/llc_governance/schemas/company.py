"""Company state of record, as handed to the differ.

``CompanyState`` composes the shared profile pieces (domicile, authority,
roster, shareholders) instead of extending an application payload.
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .applications import NormalizedApplication, RegistrationPayload
from .base import DomainModel, MoneyAmount
from .divisions import DivisionPath
from .references import CatalogReference, RegistrationAuthority
from .roster import GovernanceRoster
from .shareholders import Shareholder, VotingRightsMode
from .terms import OperatingTerm


class CompanyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    DEREGISTERED = "DEREGISTERED"


class Domicile(DomainModel):
    """Registered address and the administrative division it lies in."""

    address: str
    division_id: Optional[str] = None
    division_path: Optional[DivisionPath] = None
    administrative_division_level: Optional[int] = None


class CompanyState(DomainModel):
    """The company's approved, durable governance state.

    Shareholder voting ratios hold effective values, as produced by
    normalisation.
    """

    company_id: Optional[str] = None
    name: Optional[str] = None
    status: CompanyStatus = CompanyStatus.ACTIVE

    registered_capital: MoneyAmount = Decimal("0")
    shareholders: List[Shareholder] = Field(default_factory=list)
    voting_rights_mode: VotingRightsMode = VotingRightsMode.BY_CAPITAL_RATIO
    roster: GovernanceRoster = Field(default_factory=GovernanceRoster)

    domicile: Optional[Domicile] = None
    registration_authority: Optional[RegistrationAuthority] = None
    business_scope: Optional[str] = None
    operating_term: Optional[OperatingTerm] = None
    brand_name: Optional[str] = None
    industry_feature: Optional[str] = None
    company_type: Optional[CatalogReference] = None
    industry: Optional[CatalogReference] = None

    @classmethod
    def from_registration(
        cls,
        application: NormalizedApplication,
        company_id: Optional[str] = None,
    ) -> "CompanyState":
        """Project an approved registration into the state of record."""
        payload = application.payload
        if not isinstance(payload, RegistrationPayload):
            raise TypeError(f"{application.kind} application cannot found a company")
        return cls(
            company_id=company_id,
            name=payload.name,
            registered_capital=payload.registered_capital,
            shareholders=payload.shareholders,
            voting_rights_mode=payload.voting_rights_mode,
            roster=payload.roster,
            domicile=Domicile(
                address=payload.domicile_address,
                division_id=payload.domicile_division_id,
                division_path=payload.domicile_division_path,
                administrative_division_level=payload.administrative_division_level,
            ),
            registration_authority=payload.registration_authority,
            business_scope=payload.business_scope,
            operating_term=payload.operating_term,
            brand_name=payload.brand_name,
            industry_feature=payload.industry_feature,
            company_type=payload.company_type,
            industry=payload.industry,
        )
