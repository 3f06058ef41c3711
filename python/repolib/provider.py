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

from types import MappingProxyType
from typing import TYPE_CHECKING

from repolib.curves.discount_factors import IssuerCurveDiscountFactors, RepoCurveDiscountFactors
from repolib.enums.generics import NoInput
from repolib.errors import (
    VE_NO_ISSUER_CURVE,
    VE_NO_ISSUER_GROUP,
    VE_NO_REPO_CURVE,
    VE_NO_REPO_GROUP,
    VE_UNKNOWN_SENSITIVITY,
)
from repolib.identifiers import LegalEntityId, SecurityId
from repolib.sensitivity import (
    CurrencyParameterSensitivities,
    IssuerCurveZeroRateSensitivity,
    RepoCurveZeroRateSensitivity,
)

if TYPE_CHECKING:
    from repolib.curves import DiscountFactors, InterpolatedNodalCurve
    from repolib.identifiers import LegalEntityGroup, RepoGroup
    from repolib.sensitivity import PointSensitivities
    from repolib.typing import Mapping, datetime  # pragma: no cover


class LegalEntityDiscountingProvider:
    """
    An immutable discounting context for repo and issuer cashflows.

    Parameters
    ----------
    valuation_date : datetime
        The valuation date of all curves.
    repo_curves : dict[tuple[RepoGroup, str], DiscountFactors], optional
        Repo curve discount factors keyed by repo group and currency.
    issuer_curves : dict[tuple[LegalEntityGroup, str], DiscountFactors], optional
        Issuer curve discount factors keyed by legal entity group and currency.
    repo_curve_security_groups : dict[SecurityId, RepoGroup], optional
        Repo groups of specific securities. These take precedence over the legal entity
        mapping when the security is known.
    repo_curve_groups : dict[LegalEntityId, RepoGroup], optional
        Repo groups of legal entities.
    issuer_curve_groups : dict[LegalEntityId, LegalEntityGroup], optional
        Issuer groups of legal entities.

    Notes
    -----
    The provider never changes after construction. Calibration builds new providers from a
    known provider rather than amending it.
    """

    def __init__(
        self,
        valuation_date: datetime,
        repo_curves: Mapping[tuple[RepoGroup, str], DiscountFactors] | None = None,
        issuer_curves: Mapping[tuple[LegalEntityGroup, str], DiscountFactors] | None = None,
        repo_curve_security_groups: Mapping[SecurityId, RepoGroup] | None = None,
        repo_curve_groups: Mapping[LegalEntityId, RepoGroup] | None = None,
        issuer_curve_groups: Mapping[LegalEntityId, LegalEntityGroup] | None = None,
    ) -> None:
        self._valuation_date = valuation_date
        self._repo_curves = MappingProxyType(
            {(g, ccy.lower()): v for (g, ccy), v in (repo_curves or {}).items()}
        )
        self._issuer_curves = MappingProxyType(
            {(g, ccy.lower()): v for (g, ccy), v in (issuer_curves or {}).items()}
        )
        self._repo_curve_security_groups = MappingProxyType(dict(repo_curve_security_groups or {}))
        self._repo_curve_groups = MappingProxyType(dict(repo_curve_groups or {}))
        self._issuer_curve_groups = MappingProxyType(dict(issuer_curve_groups or {}))

    @classmethod
    def empty(cls, valuation_date: datetime) -> LegalEntityDiscountingProvider:
        return cls(valuation_date)

    @property
    def valuation_date(self) -> datetime:
        return self._valuation_date

    @property
    def repo_curves(self) -> Mapping[tuple[RepoGroup, str], DiscountFactors]:
        return self._repo_curves

    @property
    def issuer_curves(self) -> Mapping[tuple[LegalEntityGroup, str], DiscountFactors]:
        return self._issuer_curves

    @property
    def repo_curve_security_groups(self) -> Mapping[SecurityId, RepoGroup]:
        return self._repo_curve_security_groups

    @property
    def repo_curve_groups(self) -> Mapping[LegalEntityId, RepoGroup]:
        return self._repo_curve_groups

    @property
    def issuer_curve_groups(self) -> Mapping[LegalEntityId, LegalEntityGroup]:
        return self._issuer_curve_groups

    # Discount factor lookups

    def repo_curve_discount_factors(
        self,
        legal_entity_id: LegalEntityId,
        currency: str,
        security_id: SecurityId | NoInput = NoInput(0),
    ) -> RepoCurveDiscountFactors:
        """
        Return the repo curve discount factors for a legal entity, or for a specific security
        of that legal entity.

        The security mapping is used when ``security_id`` is given and mapped, otherwise the
        legal entity mapping is used.
        """
        group = None
        if not isinstance(security_id, NoInput):
            group = self._repo_curve_security_groups.get(security_id, None)
        if group is None:
            group = self._repo_curve_groups.get(legal_entity_id, None)
        if group is None:
            ident = legal_entity_id if isinstance(security_id, NoInput) else security_id
            raise ValueError(VE_NO_REPO_GROUP.format(ident))
        return RepoCurveDiscountFactors(self._repo_curve(group, currency), group)

    def issuer_curve_discount_factors(
        self, legal_entity_id: LegalEntityId, currency: str
    ) -> IssuerCurveDiscountFactors:
        """Return the issuer curve discount factors for a legal entity."""
        try:
            group = self._issuer_curve_groups[legal_entity_id]
        except KeyError:
            raise ValueError(VE_NO_ISSUER_GROUP.format(legal_entity_id))
        try:
            df = self._issuer_curves[(group, currency.lower())]
        except KeyError:
            raise ValueError(VE_NO_ISSUER_CURVE.format(group, currency.lower()))
        return IssuerCurveDiscountFactors(df, group)

    def discount_factors(
        self, identifier: LegalEntityId | SecurityId, currency: str
    ) -> DiscountFactors:
        """
        Return the repo curve discount factors for a legal entity or a security.

        A security must be mapped to a repo group directly.
        """
        if isinstance(identifier, SecurityId):
            try:
                group = self._repo_curve_security_groups[identifier]
            except KeyError:
                raise ValueError(VE_NO_REPO_GROUP.format(identifier))
            return self._repo_curve(group, currency)
        return self.repo_curve_discount_factors(identifier, currency).discount_factors

    def _repo_curve(self, group: RepoGroup, currency: str) -> DiscountFactors:
        try:
            return self._repo_curves[(group, currency.lower())]
        except KeyError:
            raise ValueError(VE_NO_REPO_CURVE.format(group, currency.lower()))

    # Sensitivities

    def parameter_sensitivity(
        self, point_sensitivities: PointSensitivities
    ) -> CurrencyParameterSensitivities:
        """
        Convert point sensitivities into sensitivities to the parameters of the curves.

        Point sensitivities to the same curve are summed.
        """
        sens = CurrencyParameterSensitivities.empty()
        for point in point_sensitivities.normalized():
            if isinstance(point, RepoCurveZeroRateSensitivity):
                df = self._repo_curve(point.repo_group, point.curve_currency)
            elif isinstance(point, IssuerCurveZeroRateSensitivity):
                key = (point.legal_entity_group, point.curve_currency)
                try:
                    df = self._issuer_curves[key]
                except KeyError:
                    raise ValueError(VE_NO_ISSUER_CURVE.format(*key))
            else:
                raise ValueError(VE_UNKNOWN_SENSITIVITY.format(type(point).__name__))
            sens = sens.combined_with(df.parameter_sensitivity(point))
        return sens

    # Curves

    def curves(self) -> dict[str, InterpolatedNodalCurve]:
        """Return every distinct curve held by the provider, keyed by name."""
        ret: dict[str, InterpolatedNodalCurve] = {}
        for df in (*self._repo_curves.values(), *self._issuer_curves.values()):
            ret.setdefault(df.curve.name, df.curve)
        return ret

    def find_curve(self, name: str) -> InterpolatedNodalCurve | None:
        return self.curves().get(name, None)

    def __repr__(self) -> str:
        return (
            f"<repolib.LegalEntityDiscountingProvider {self._valuation_date:%Y-%m-%d} "
            f"repo: {len(self._repo_curves)}, issuer: {len(self._issuer_curves)}>"
        )
