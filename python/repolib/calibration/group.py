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

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from repolib import defaults
from repolib.calibration.market_quote import CurveParameterSize
from repolib.errors import VE_MISSING_CURVE_DEFINITION

if TYPE_CHECKING:
    from repolib.curves import CurveMetadata, InterpolatedNodalCurveDefinition
    from repolib.identifiers import LegalEntityGroup, LegalEntityId, RepoGroup, SecurityId
    from repolib.market_data import MarketData, ReferenceData
    from repolib.typing import Mapping, ResolvedTrade, Sequence, datetime  # pragma: no cover


@dataclass(frozen=True)
class RepoCurveEntry:
    """
    The repo groups and currencies discounted by the curve named ``curve_name``.
    """

    curve_name: str
    entries: frozenset[tuple[RepoGroup, str]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", frozenset((g, ccy.lower()) for g, ccy in self.entries))


@dataclass(frozen=True)
class IssuerCurveEntry:
    """
    The legal entity groups and currencies discounted by the curve named ``curve_name``.
    """

    curve_name: str
    entries: frozenset[tuple[LegalEntityGroup, str]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", frozenset((g, ccy.lower()) for g, ccy in self.entries))


class CurveGroupDefinition:
    """
    The definition of a group of repo and issuer curves calibrated together.

    Parameters
    ----------
    name : str
        The name of the group.
    curve_definitions : Sequence[InterpolatedNodalCurveDefinition]
        The curves of the group, in parameter order.
    repo_curve_entries : Sequence[RepoCurveEntry], optional
        The repo groups and currencies each curve discounts.
    issuer_curve_entries : Sequence[IssuerCurveEntry], optional
        The legal entity groups and currencies each curve discounts.
    repo_curve_security_groups : dict[SecurityId, RepoGroup], optional
        Repo groups of specific securities.
    repo_curve_groups : dict[LegalEntityId, RepoGroup], optional
        Repo groups of legal entities.
    issuer_curve_groups : dict[LegalEntityId, LegalEntityGroup], optional
        Issuer groups of legal entities.
    compute_jacobian : bool, optional
        Attach the Jacobian of each curve to its metadata after calibration.
    compute_pv_sensitivity_to_market_quote : bool, optional
        Attach the sensitivity of the present value of each node instrument to its market
        quote. This requires, and so implies, ``compute_jacobian``.

    Notes
    -----
    A curve definition need not have an entry; it is then calibrated but discounts nothing.
    An entry naming a curve without a definition raises a *ValueError*.
    """

    def __init__(
        self,
        name: str,
        curve_definitions: Sequence[InterpolatedNodalCurveDefinition],
        repo_curve_entries: Sequence[RepoCurveEntry] = (),
        issuer_curve_entries: Sequence[IssuerCurveEntry] = (),
        repo_curve_security_groups: Mapping[SecurityId, RepoGroup] | None = None,
        repo_curve_groups: Mapping[LegalEntityId, RepoGroup] | None = None,
        issuer_curve_groups: Mapping[LegalEntityId, LegalEntityGroup] | None = None,
        compute_jacobian: bool = True,
        compute_pv_sensitivity_to_market_quote: bool = False,
    ) -> None:
        self.name = name
        self.curve_definitions = tuple(curve_definitions)
        self.repo_curve_entries = tuple(repo_curve_entries)
        self.issuer_curve_entries = tuple(issuer_curve_entries)
        self.repo_curve_security_groups = MappingProxyType(dict(repo_curve_security_groups or {}))
        self.repo_curve_groups = MappingProxyType(dict(repo_curve_groups or {}))
        self.issuer_curve_groups = MappingProxyType(dict(issuer_curve_groups or {}))
        self.compute_pv_sensitivity_to_market_quote = compute_pv_sensitivity_to_market_quote
        self.compute_jacobian = compute_jacobian or compute_pv_sensitivity_to_market_quote

        self._definitions = {d.name: d for d in self.curve_definitions}
        self._repo_entries = {e.curve_name: e for e in self.repo_curve_entries}
        self._issuer_entries = {e.curve_name: e for e in self.issuer_curve_entries}
        for entry in (*self.repo_curve_entries, *self.issuer_curve_entries):
            if entry.curve_name not in self._definitions:
                raise ValueError(VE_MISSING_CURVE_DEFINITION.format(name, entry.curve_name))

    def find_curve_definition(self, name: str) -> InterpolatedNodalCurveDefinition | None:
        return self._definitions.get(name, None)

    def find_repo_curve_entry(self, name: str) -> RepoCurveEntry | None:
        return self._repo_entries.get(name, None)

    def find_issuer_curve_entry(self, name: str) -> IssuerCurveEntry | None:
        return self._issuer_entries.get(name, None)

    @property
    def total_parameter_count(self) -> int:
        return sum(d.parameter_count for d in self.curve_definitions)

    def curve_order(self) -> list[CurveParameterSize]:
        """The name and parameter count of each curve, in parameter order."""
        return [CurveParameterSize(d.name, d.parameter_count) for d in self.curve_definitions]

    def metadata(self, valuation_date: datetime, ref_data: ReferenceData) -> list[CurveMetadata]:
        return [d.metadata(valuation_date, ref_data) for d in self.curve_definitions]

    def resolved_trades(
        self, market_data: MarketData, ref_data: ReferenceData
    ) -> list[ResolvedTrade]:
        """
        Return the trade of every node, resolved and in parameter order. Each trade is
        created with a quantity of ``defaults.notional``.
        """
        return [
            node.resolved_trade(defaults.notional, market_data, ref_data)
            for d in self.curve_definitions
            for node in d.nodes
        ]

    def initial_guesses(self, market_data: MarketData) -> list[float]:
        return [g for d in self.curve_definitions for g in d.initial_guess(market_data)]

    def filtered(self, valuation_date: datetime, ref_data: ReferenceData) -> CurveGroupDefinition:
        """Return a definition whose curves have their invalid nodes removed."""
        return CurveGroupDefinition(
            name=self.name,
            curve_definitions=[
                d.filtered(valuation_date, ref_data) for d in self.curve_definitions
            ],
            repo_curve_entries=self.repo_curve_entries,
            issuer_curve_entries=self.issuer_curve_entries,
            repo_curve_security_groups=self.repo_curve_security_groups,
            repo_curve_groups=self.repo_curve_groups,
            issuer_curve_groups=self.issuer_curve_groups,
            compute_jacobian=self.compute_jacobian,
            compute_pv_sensitivity_to_market_quote=self.compute_pv_sensitivity_to_market_quote,
        )

    def __repr__(self) -> str:
        return f"<repolib.CurveGroupDefinition:{self.name} ({len(self.curve_definitions)} curves)>"
