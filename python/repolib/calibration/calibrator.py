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

import logging
from typing import TYPE_CHECKING

import numpy as np

from repolib.calibration.functions import CalibrationDerivative, CalibrationValue
from repolib.calibration.generator import ImmutableProviderGenerator
from repolib.calibration.group import CurveGroupDefinition
from repolib.calibration.market_quote import JacobianCalibrationMatrix
from repolib.calibration.measures import PAR_SPREAD, PRESENT_VALUE
from repolib.calibration.newton import newton_ndim
from repolib.enums.generics import NoInput
from repolib.errors import VE_CALIBRATION_FAILED, VE_MISSING_JACOBIAN, VE_NON_SQUARE
from repolib.provider import LegalEntityDiscountingProvider

if TYPE_CHECKING:
    from repolib.calibration.market_quote import CurveParameterSize
    from repolib.calibration.measures import CalibrationMeasures
    from repolib.market_data import MarketData, ReferenceData
    from repolib.typing import (  # pragma: no cover
        Any,
        Arr1dF64,
        Arr2dF64,
        Callable,
        ResolvedTrade,
        Sequence,
    )

logger = logging.getLogger(__name__)


class CurveCalibrator:
    """
    Calibrates groups of repo and issuer curves to the market quotes of their node
    instruments.

    Parameters
    ----------
    measures : CalibrationMeasures, optional
        The measures driven to zero by the calibration. Defaults to par spread.
    pv_measures : CalibrationMeasures, optional
        The measures used for the present value sensitivity to market quotes. Defaults to
        present value.
    root_finder : Callable, optional
        The multidimensional root finder, of the signature of
        :func:`~repolib.calibration.newton_ndim`.
    max_iter : int, optional
        Passed to the root finder. Defaults to ``defaults.max_iter``.
    func_tol : float, optional
        Passed to the root finder. Defaults to ``defaults.func_tol``.
    conv_tol : float, optional
        Passed to the root finder. Defaults to ``defaults.conv_tol``.

    Notes
    -----
    Groups are calibrated in sequence, each on top of the provider produced by the previous
    ones. The Jacobian of a curve is expressed against the market quotes of every instrument
    calibrated so far in the same run, so that a later group's Jacobian includes its
    dependence on earlier groups.

    Examples
    --------
    .. code-block:: python

       provider = CurveCalibrator().calibrate([group_uk, group_us], market_data, ref_data)
    """

    def __init__(
        self,
        measures: CalibrationMeasures = PAR_SPREAD,
        pv_measures: CalibrationMeasures = PRESENT_VALUE,
        root_finder: Callable[..., dict[str, Any]] = newton_ndim,
        max_iter: int | NoInput = NoInput(0),
        func_tol: float | NoInput = NoInput(0),
        conv_tol: float | NoInput = NoInput(0),
    ) -> None:
        self.measures = measures
        self.pv_measures = pv_measures
        self.root_finder = root_finder
        self.max_iter = max_iter
        self.func_tol = func_tol
        self.conv_tol = conv_tol

    def calibrate(
        self,
        definitions: CurveGroupDefinition | Sequence[CurveGroupDefinition],
        market_data: MarketData,
        ref_data: ReferenceData,
        known: LegalEntityDiscountingProvider | None = None,
    ) -> LegalEntityDiscountingProvider:
        """
        Calibrate one or more curve groups in sequence.

        Parameters
        ----------
        definitions : CurveGroupDefinition or Sequence[CurveGroupDefinition]
            The groups, calibrated in order.
        market_data : MarketData
            The quotes of the node instruments. Its valuation date is the valuation date of
            the curves.
        ref_data : ReferenceData
            Securities and calendars used to resolve the node instruments.
        known : LegalEntityDiscountingProvider, optional
            Curves already calibrated, used by and included in the result.

        Returns
        -------
        LegalEntityDiscountingProvider
        """
        if isinstance(definitions, CurveGroupDefinition):
            definitions = [definitions]
        provider = known or LegalEntityDiscountingProvider.empty(market_data.valuation_date)
        order_prev: list[CurveParameterSize] = []
        jacobians: dict[str, JacobianCalibrationMatrix] = {}
        for definition in definitions:
            provider, order_prev, jacobians = self._calibrate(
                definition, market_data, ref_data, provider, order_prev, jacobians
            )
        return provider

    def calibrate_group(
        self,
        definition: CurveGroupDefinition,
        market_data: MarketData,
        ref_data: ReferenceData,
        known: LegalEntityDiscountingProvider | None = None,
    ) -> LegalEntityDiscountingProvider:
        """Calibrate a single curve group. See :meth:`calibrate`."""
        return self.calibrate([definition], market_data, ref_data, known)

    def _calibrate(
        self,
        definition: CurveGroupDefinition,
        market_data: MarketData,
        ref_data: ReferenceData,
        known: LegalEntityDiscountingProvider,
        order_prev: list[CurveParameterSize],
        jacobians: dict[str, JacobianCalibrationMatrix],
    ) -> tuple[
        LegalEntityDiscountingProvider,
        list[CurveParameterSize],
        dict[str, JacobianCalibrationMatrix],
    ]:
        definition = definition.filtered(market_data.valuation_date, ref_data)
        trades = definition.resolved_trades(market_data, ref_data)
        guesses = definition.initial_guesses(market_data)
        order_group = definition.curve_order()
        order_all = [*order_prev, *order_group]

        n_params = definition.total_parameter_count
        if len(trades) != n_params:
            raise ValueError(VE_NON_SQUARE.format(definition.name, len(trades), n_params))
        logger.info(
            "Calibrating curve group '%s': %d curves, %d instruments.",
            definition.name,
            len(order_group),
            len(trades),
        )

        generator = ImmutableProviderGenerator.of(known, definition, ref_data)
        params = self._solve(definition.name, generator, trades, guesses, order_group)

        if definition.compute_jacobian:
            provider = generator.generate(params)
            jacobians = self._update_jacobians(
                definition.name, provider, trades, order_group, order_prev, order_all, jacobians
            )

        sensitivities: dict[str, Arr1dF64] = {}
        if definition.compute_pv_sensitivity_to_market_quote:
            provider_jac = generator.generate(params, jacobians)
            sensitivities = self._sensitivity_to_market_quote(provider_jac, trades, order_group)

        provider = generator.generate(params, jacobians, sensitivities)
        return provider, order_all, jacobians

    def _solve(
        self,
        name: str,
        generator: ImmutableProviderGenerator,
        trades: list[ResolvedTrade],
        guesses: list[float],
        order_group: list[CurveParameterSize],
    ) -> Arr1dF64:
        if len(trades) == 0:
            return np.zeros(0)
        value_fn = CalibrationValue(tuple(trades), self.measures, generator)
        derivative_fn = CalibrationDerivative(
            tuple(trades), self.measures, generator, tuple(order_group)
        )
        try:
            result = self.root_finder(
                value_fn,
                derivative_fn,
                guesses,
                max_iter=self.max_iter,
                func_tol=self.func_tol,
                conv_tol=self.conv_tol,
            )
        except (ValueError, np.linalg.LinAlgError) as err:
            raise ValueError(VE_CALIBRATION_FAILED.format(name, err)) from err
        if result["status"] != "SUCCESS":
            raise ValueError(VE_CALIBRATION_FAILED.format(name, result))
        logger.debug(
            "Curve group '%s' solved in %d iterations (%.4fs).",
            name,
            result["iterations"],
            result["time"],
        )
        return np.asarray(result["g"], dtype=float)

    def _derivatives(
        self,
        measures: CalibrationMeasures,
        trades: list[ResolvedTrade],
        provider: LegalEntityDiscountingProvider,
        order: list[CurveParameterSize],
    ) -> Arr2dF64:
        return np.vstack([measures.derivative(t, provider, order) for t in trades])

    def _update_jacobians(
        self,
        name: str,
        provider: LegalEntityDiscountingProvider,
        trades: list[ResolvedTrade],
        order_group: list[CurveParameterSize],
        order_prev: list[CurveParameterSize],
        order_all: list[CurveParameterSize],
        jacobians: dict[str, JacobianCalibrationMatrix],
    ) -> dict[str, JacobianCalibrationMatrix]:
        """
        Return ``jacobians`` extended with the Jacobian of each curve of the group, the
        sensitivity of its parameters to the market quotes of every instrument of
        ``order_all``.
        """
        if len(trades) == 0:
            return jacobians
        n_prev = sum(c.parameter_count for c in order_prev)
        res = self._derivatives(self.measures, trades, provider, order_all)
        # direct: d(parameters) / d(quotes) of the group is the inverse of the derivative
        pdm_current = np.linalg.inv(res[:, n_prev:])
        pdm = pdm_current
        if n_prev > 0:
            transition = np.zeros((n_prev, n_prev))
            row = 0
            for c in order_prev:
                jac = jacobians.get(c.name, None)
                if jac is None:
                    raise ValueError(VE_MISSING_JACOBIAN.format(c.name))
                matrix = jac.matrix
                transition[row : row + c.parameter_count, : matrix.shape[1]] = matrix
                row += c.parameter_count
            # indirect: through the dependence on the parameters of earlier groups
            pdm_prev = -pdm_current @ res[:, :n_prev] @ transition
            pdm = np.hstack([pdm_prev, pdm_current])
        logger.debug("Curve group '%s' Jacobian computed with shape %s.", name, pdm.shape)

        ret = dict(jacobians)
        start = 0
        for c in order_group:
            ret[c.name] = JacobianCalibrationMatrix(
                order_all, pdm[start : start + c.parameter_count, :]
            )
            start += c.parameter_count
        return ret

    def _sensitivity_to_market_quote(
        self,
        provider: LegalEntityDiscountingProvider,
        trades: list[ResolvedTrade],
        order_group: list[CurveParameterSize],
    ) -> dict[str, Arr1dF64]:
        """
        Return, per curve, the sensitivity of the present value of each node instrument to its
        own market quote.
        """
        ret: dict[str, Arr1dF64] = {}
        node = 0
        for c in order_group:
            values = np.zeros(c.parameter_count)
            for i in range(c.parameter_count):
                derivative = self.pv_measures.derivative(trades[node], provider, order_group)
                values[i] = derivative[node]
                node += 1
            ret[c.name] = values
        return ret

    def __repr__(self) -> str:
        return f"<repolib.CurveCalibrator measures:{self.measures.name}>"
