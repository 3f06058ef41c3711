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

from abc import ABCMeta, abstractmethod
from typing import TYPE_CHECKING

from repolib.curves.discount_factors import discount_factors
from repolib.curves.metadata import CurveInfoType
from repolib.errors import VE_PARAMETER_LENGTH
from repolib.provider import LegalEntityDiscountingProvider

if TYPE_CHECKING:
    from repolib.calibration.group import CurveGroupDefinition
    from repolib.calibration.market_quote import JacobianCalibrationMatrix
    from repolib.curves import CurveMetadata, DiscountFactors, InterpolatedNodalCurveDefinition
    from repolib.identifiers import LegalEntityGroup, RepoGroup
    from repolib.market_data import ReferenceData
    from repolib.typing import Arr1dF64, Mapping, Sequence  # pragma: no cover


class ProviderGenerator(metaclass=ABCMeta):
    """
    Abstract base class for the mapping of a parameter vector onto a discounting provider.
    """

    @abstractmethod
    def generate(
        self,
        parameters: Sequence[float],
        jacobians: Mapping[str, JacobianCalibrationMatrix] | None = None,
        sensitivities_to_market_quote: Mapping[str, Arr1dF64] | None = None,
    ) -> LegalEntityDiscountingProvider:
        pass  # pragma: no cover


class ImmutableProviderGenerator(ProviderGenerator):
    """
    Generates a :class:`~repolib.provider.LegalEntityDiscountingProvider` from the parameters
    of the curves of a group, overlaying them on a known provider.

    Construct with :meth:`of`.

    Parameters
    ----------
    known : LegalEntityDiscountingProvider
        The provider holding curves calibrated previously. It is never amended.
    curve_definitions : Sequence[InterpolatedNodalCurveDefinition]
        The curves of the group, in parameter order.
    curve_metadata : Sequence[CurveMetadata]
        The metadata of each curve, in the same order.
    repo_curve_ids : Sequence[frozenset[tuple[RepoGroup, str]]]
        The repo entries of each curve, in the same order.
    issuer_curve_ids : Sequence[frozenset[tuple[LegalEntityGroup, str]]]
        The issuer entries of each curve, in the same order.
    group : CurveGroupDefinition
        The group providing the mapping tables overlaid on those of ``known``.
    """

    def __init__(
        self,
        known: LegalEntityDiscountingProvider,
        curve_definitions: Sequence[InterpolatedNodalCurveDefinition],
        curve_metadata: Sequence[CurveMetadata],
        repo_curve_ids: Sequence[frozenset[tuple[RepoGroup, str]]],
        issuer_curve_ids: Sequence[frozenset[tuple[LegalEntityGroup, str]]],
        group: CurveGroupDefinition,
    ) -> None:
        self.known = known
        self.curve_definitions = tuple(curve_definitions)
        self.curve_metadata = tuple(curve_metadata)
        self.repo_curve_ids = tuple(repo_curve_ids)
        self.issuer_curve_ids = tuple(issuer_curve_ids)
        self.group = group
        self.total_parameter_count = sum(d.parameter_count for d in self.curve_definitions)

    @classmethod
    def of(
        cls,
        known: LegalEntityDiscountingProvider,
        group: CurveGroupDefinition,
        ref_data: ReferenceData,
    ) -> ImmutableProviderGenerator:
        """
        Create a generator for the curves of ``group``, valued on the valuation date of
        ``known``.
        """
        repo_ids, issuer_ids = [], []
        for d in group.curve_definitions:
            repo_entry = group.find_repo_curve_entry(d.name)
            issuer_entry = group.find_issuer_curve_entry(d.name)
            repo_ids.append(frozenset() if repo_entry is None else repo_entry.entries)
            issuer_ids.append(frozenset() if issuer_entry is None else issuer_entry.entries)
        return cls(
            known,
            group.curve_definitions,
            group.metadata(known.valuation_date, ref_data),
            repo_ids,
            issuer_ids,
            group,
        )

    def generate(
        self,
        parameters: Sequence[float],
        jacobians: Mapping[str, JacobianCalibrationMatrix] | None = None,
        sensitivities_to_market_quote: Mapping[str, Arr1dF64] | None = None,
    ) -> LegalEntityDiscountingProvider:
        """
        Build a provider from the known provider and the curves materialised from
        ``parameters``.

        Known entries holding a curve with the name of a curve of the group are dropped, so a
        curve name always identifies a single curve of the result.

        Parameters
        ----------
        parameters : Sequence[float]
            The concatenated parameters of the curves, in curve definition order.
        jacobians : dict[str, JacobianCalibrationMatrix], optional
            Jacobians to attach to the metadata of the named curves.
        sensitivities_to_market_quote : dict[str, array], optional
            Present value sensitivities to market quotes to attach to the named curves.

        Returns
        -------
        LegalEntityDiscountingProvider
        """
        if len(parameters) != self.total_parameter_count:
            raise ValueError(
                VE_PARAMETER_LENGTH.format(len(parameters), self.total_parameter_count)
            )
        jacobians = jacobians or {}
        sensitivities_to_market_quote = sensitivities_to_market_quote or {}

        valuation_date = self.known.valuation_date
        # known entries of a curve calibrated here are dropped, not shadowed
        names = {d.name for d in self.curve_definitions}
        repo_curves: dict[tuple[RepoGroup, str], DiscountFactors] = {
            k: v for k, v in self.known.repo_curves.items() if v.curve.name not in names
        }
        issuer_curves: dict[tuple[LegalEntityGroup, str], DiscountFactors] = {
            k: v for k, v in self.known.issuer_curves.items() if v.curve.name not in names
        }

        offset = 0
        for i, definition in enumerate(self.curve_definitions):
            n = definition.parameter_count
            params = list(parameters[offset : offset + n])
            offset += n

            metadata = self.curve_metadata[i]
            if definition.name in jacobians:
                metadata = metadata.with_info(CurveInfoType.Jacobian, jacobians[definition.name])
            if definition.name in sensitivities_to_market_quote:
                metadata = metadata.with_info(
                    CurveInfoType.PVSensitivityToMarketQuote,
                    sensitivities_to_market_quote[definition.name],
                )
            curve = definition.curve(valuation_date, metadata, params)

            for group, ccy in self.repo_curve_ids[i]:
                repo_curves[(group, ccy)] = discount_factors(ccy, valuation_date, curve)
            for group, ccy in self.issuer_curve_ids[i]:
                issuer_curves[(group, ccy)] = discount_factors(ccy, valuation_date, curve)

        return LegalEntityDiscountingProvider(
            valuation_date=valuation_date,
            repo_curves=repo_curves,
            issuer_curves=issuer_curves,
            repo_curve_security_groups={
                **self.known.repo_curve_security_groups,
                **self.group.repo_curve_security_groups,
            },
            repo_curve_groups={**self.known.repo_curve_groups, **self.group.repo_curve_groups},
            issuer_curve_groups={
                **self.known.issuer_curve_groups,
                **self.group.issuer_curve_groups,
            },
        )
