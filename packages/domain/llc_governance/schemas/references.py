"""Normalised references for fields given as one of two alternatives."""

from typing import Literal, Optional

from .base import DomainModel

ReferenceSource = Literal["primary", "secondary"]


class RegistrationAuthority(DomainModel):
    """Registration authority, given as a company reference or as a name.

    When ``company_id`` was supplied, ``name`` is left for an external
    lookup to back-fill.
    """

    company_id: Optional[str] = None
    name: Optional[str] = None
    source: ReferenceSource


class CatalogReference(DomainModel):
    """Entry of an external catalog (company type, industry) by code or by id."""

    code: Optional[str] = None
    id: Optional[str] = None
    source: ReferenceSource
