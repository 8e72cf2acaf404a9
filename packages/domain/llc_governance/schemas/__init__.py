"""Governance domain schemas.

This package contains all Pydantic models of the governance engine:
- Base types and conventions
- Party references, operating terms, shareholders
- Governance roster and roster policy
- Administrative divisions
- Application payloads and the normalised envelope
- Company state of record and change sets

Usage:
    from llc_governance.schemas import (
        PartyReference, Shareholder, GovernanceRoster,
        NormalizedApplication, CompanyState, ChangeSet
    )
"""

# Base types
from .base import (
    DomainModel,
    Ratio,
    PositiveRatio,
    MoneyAmount,
    OfficerId,
    Reason,
)

# Parties, terms, shareholders
from .parties import PartyKind, PartyReference
from .terms import IndefiniteTerm, FixedTerm, OperatingTerm
from .shareholders import Shareholder, ShareholderSet, VotingRightsMode

# Roster
from .roster import GovernanceRoster, RosterPolicy, OfficerDelta

# Divisions
from .divisions import (
    DivisionRef,
    DivisionPath,
    DivisionNode,
    DivisionDirectory,
    InMemoryDivisionDirectory,
)

# References
from .references import RegistrationAuthority, CatalogReference

# Applications
from .applications import (
    ApplicationKind,
    ApplicationStatus,
    CapitalChangeType,
    ApplicationPayload,
    RegistrationPayload,
    CapitalChangePayload,
    OfficerChangePayload,
    ManagementChangePayload,
    EquityTransferPayload,
    DomicileChangePayload,
    RenamePayload,
    BusinessScopeChangePayload,
    DeregistrationPayload,
    PAYLOAD_MODELS,
    NormalizedApplication,
)

# Company state
from .company import CompanyStatus, Domicile, CompanyState

# Change sets
from .changes import (
    OfficerRole,
    ConsentRole,
    ShareholderAdded,
    ShareholderRemoved,
    ShareholderUpdated,
    OfficerAdded,
    OfficerRemoved,
    FieldUpdated,
    Change,
    ConsentRequirement,
    ChangeSet,
)

__all__ = [
    # Base types
    "DomainModel",
    "Ratio",
    "PositiveRatio",
    "MoneyAmount",
    "OfficerId",
    "Reason",
    # Parties, terms, shareholders
    "PartyKind",
    "PartyReference",
    "IndefiniteTerm",
    "FixedTerm",
    "OperatingTerm",
    "Shareholder",
    "ShareholderSet",
    "VotingRightsMode",
    # Roster
    "GovernanceRoster",
    "RosterPolicy",
    "OfficerDelta",
    # Divisions
    "DivisionRef",
    "DivisionPath",
    "DivisionNode",
    "DivisionDirectory",
    "InMemoryDivisionDirectory",
    # References
    "RegistrationAuthority",
    "CatalogReference",
    # Applications
    "ApplicationKind",
    "ApplicationStatus",
    "CapitalChangeType",
    "ApplicationPayload",
    "RegistrationPayload",
    "CapitalChangePayload",
    "OfficerChangePayload",
    "ManagementChangePayload",
    "EquityTransferPayload",
    "DomicileChangePayload",
    "RenamePayload",
    "BusinessScopeChangePayload",
    "DeregistrationPayload",
    "PAYLOAD_MODELS",
    "NormalizedApplication",
    # Company state
    "CompanyStatus",
    "Domicile",
    "CompanyState",
    # Change sets
    "OfficerRole",
    "ConsentRole",
    "ShareholderAdded",
    "ShareholderRemoved",
    "ShareholderUpdated",
    "OfficerAdded",
    "OfficerRemoved",
    "FieldUpdated",
    "Change",
    "ConsentRequirement",
    "ChangeSet",
]
