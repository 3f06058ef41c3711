# SPDX-License-Identifier: LicenseRef-Rateslib-Dual
#
# Copyright (c) 2026 Siffrorna Technology Limited
#
# Dual-licensed: Free Educational Licence or Paid Commercial Licence (commercial/professional use)
# Source-available, not open source.
#
# See LICENSE and https://rateslib.com/py/en/latest/i_licence.html for details,
# and/or contact info (at) rateslib (dot) com
####################################################################################################

"""
Identifiers for legal entities, securities, curve groups and market quotes.

Each identifier is an immutable, hashable value so that it can key the lookup tables of a
:class:`~repolib.provider.LegalEntityDiscountingProvider`. Identifiers of different types
never compare equal, even when they wrap the same text.
"""

from __future__ import annotations

from dataclasses import dataclass

from repolib.errors import VE_INVALID_STANDARD_ID


@dataclass(frozen=True)
class StandardId:
    """
    An identifier made of a ``scheme`` and a ``value``, written as *"scheme~value"*.
    """

    scheme: str
    value: str

    def __post_init__(self) -> None:
        if not self.scheme or not self.value:
            raise ValueError(VE_INVALID_STANDARD_ID.format(f"{self.scheme}~{self.value}"))

    @classmethod
    def of(cls, scheme: str, value: str) -> StandardId:
        return cls(scheme, value)

    @classmethod
    def parse(cls, text: str) -> StandardId:
        """Parse an identifier from a string of the form *"scheme~value"*."""
        scheme, sep, value = text.partition("~")
        if not sep:
            raise ValueError(VE_INVALID_STANDARD_ID.format(text))
        return cls(scheme, value)

    def __str__(self) -> str:
        return f"{self.scheme}~{self.value}"


@dataclass(frozen=True)
class LegalEntityId(StandardId):
    """Identifier of a legal entity, for example the issuer of a bond."""


@dataclass(frozen=True)
class SecurityId(StandardId):
    """Identifier of a security, for example a bond used as repo collateral."""


@dataclass(frozen=True)
class QuoteId(StandardId):
    """Identifier of a market quote held in :class:`~repolib.market_data.MarketData`."""


@dataclass(frozen=True)
class RepoGroup:
    """A name bucketing the legal entities and securities that share a repo curve."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class LegalEntityGroup:
    """A name bucketing the legal entities that share an issuer curve."""

    name: str

    def __str__(self) -> str:
        return self.name
