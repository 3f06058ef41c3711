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

from time import time
from typing import TYPE_CHECKING

import numpy as np

from repolib import defaults
from repolib.enums.generics import NoInput, _drb
from repolib.errors import VE_MAX_ITER

if TYPE_CHECKING:
    from repolib.typing import Any, Arr1dF64, DerivativeFunction, Sequence, ValueFunction


def newton_ndim(
    value_fn: ValueFunction,
    derivative_fn: DerivativeFunction,
    g0: Sequence[float],
    max_iter: int | NoInput = NoInput(0),
    func_tol: float | NoInput = NoInput(0),
    conv_tol: float | NoInput = NoInput(0),
    log: bool | NoInput = NoInput(0),
    raise_on_fail: bool = True,
) -> dict[str, Any]:
    """
    Use the Newton-Raphson algorithm to determine the root of a function searching **many**
    variables.

    Solves the *n* root equations :math:`f_i(g_1, \\hdots, g_n)=0` for each :math:`g_j`.

    Parameters
    ----------
    value_fn: callable
        The function, *f*, to find the root of, of the signature `f([g_1, .., g_n])`,
        returning an array of *n* values.
    derivative_fn: callable
        The Jacobian of *f* with respect to *g*, of the same signature, returning an array of
        shape *(n, n)*.
    g0: Sequence of float
        Initial guess of the root values. Should be reasonable to avoid failure.
    max_iter: int, optional
        The maximum number of iterations to try before exiting. Defaults to
        ``defaults.max_iter``.
    func_tol: float, optional
        The absolute function tolerance to reach before exiting. Defaults to
        ``defaults.func_tol``.
    conv_tol: float, optional
        The convergence tolerance for subsequent iterations of *g*. Defaults to
        ``defaults.conv_tol``.
    log: bool, optional
        Print the solver result. Defaults to ``defaults.solver_log``.
    raise_on_fail: bool, optional
        If *False* will return a solver result dict with state and message indicating failure.

    Returns
    -------
    dict

    Examples
    --------
    Iteratively solve the equation system:

    - :math:`f_0(\\mathbf{g}) = g_1^2 + g_2^2 - 2 = 0`.
    - :math:`f_1(\\mathbf{g}) = g_1^2 - 2g_2^2 + 2 = 0`.

    .. ipython:: python

       from repolib.calibration import newton_ndim

       def f(g):
           return np.array([g[0] ** 2 + g[1] ** 2 - 2, g[0] ** 2 - 2 * g[1] ** 2 + 2])

       def df(g):
           return np.array([[2 * g[0], 2 * g[1]], [2 * g[0], -4 * g[1]]])

       newton_ndim(f, df, g0=[1.5, 1.5])
    """
    max_iter = _drb(defaults.max_iter, max_iter)
    func_tol = _drb(defaults.func_tol, func_tol)
    conv_tol = _drb(defaults.conv_tol, conv_tol)
    log = _drb(defaults.solver_log, log)

    t0 = time()
    i = 0
    g0_: Arr1dF64 = np.array([float(_) for _ in g0])
    g1: Arr1dF64 = g0_
    state = -1

    while i < max_iter:
        f0 = np.asarray(value_fn(g0_), dtype=float)
        f1 = np.asarray(derivative_fn(g0_), dtype=float)

        i += 1
        if np.all(np.abs(f0) < func_tol):
            # one more step refines the root unless the Jacobian is singular there
            try:
                g1 = g0_ - np.linalg.solve(f1, f0)
            except np.linalg.LinAlgError:
                g1 = g0_
            state = 2
            break
        g1 = g0_ - np.linalg.solve(f1, f0)
        if np.all(np.abs(g1 - g0_) < conv_tol):
            state = 1
            break
        g0_ = g1

    if state == -1:
        if raise_on_fail:
            raise ValueError(VE_MAX_ITER.format(max_iter))
        return _solver_result(-1, i, g1, time() - t0, log=True, algo="newton_ndim")

    return _solver_result(state, i, g1, time() - t0, log=log, algo="newton_ndim")


STATE_MAP = {
    1: ["SUCCESS", "`conv_tol` reached"],
    2: ["SUCCESS", "`func_tol` reached"],
    -1: ["FAILURE", "`max_iter` breached"],
}


def _solver_result(
    state: int, i: int, func_val: Arr1dF64, time: float, log: bool, algo: str
) -> dict[str, Any]:
    if log:
        print(
            f"{STATE_MAP[state][0]}: {STATE_MAP[state][1]} after {i} iterations "
            f"({algo}), `f_val`: {func_val}, "
            f"`time`: {time:.4f}s"
        )
    return {
        "status": STATE_MAP[state][0],
        "state": state,
        "g": func_val,
        "iterations": i,
        "time": time,
    }
