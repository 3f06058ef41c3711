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

from copy import deepcopy
from datetime import datetime
from typing import TYPE_CHECKING

import matplotlib.dates as mdates
import matplotlib.pyplot as plt

from repolib._spec_loader import REPO_CONVENTIONS
from repolib.enums.generics import NoInput, _drb

PlotOutput = tuple[plt.Figure, plt.Axes, list[plt.Line2D]]  # type: ignore[name-defined]

if TYPE_CHECKING:
    from repolib.typing import Any  # pragma: no cover

DEFAULTS = dict(
    # Scheduling
    modifier="F",
    calendar="all",
    spot_lag=1,
    # Instruments
    convention="Act360",
    notional=1.0,
    # Curves
    curve_convention="Act365F",
    interpolation="linear",
    value_type="zero_rate",
    min_gap_in_days=1,
    date_order_action="exception",  # or "drop_this" or "drop_other"
    # Calibration
    max_iter=50,
    func_tol=1e-12,
    conv_tol=1e-12,
    solver_log=False,
    missing_jacobian="raise",  # or "warn" or "ignore"
    # Misc
    headers={
        "curve": "Curve",
        "label": "Label",
        "date": "Date",
        "currency": "Ccy",
        "sensitivity": "Sensitivity",
    },
    spec=REPO_CONVENTIONS,
)


class Defaults:
    """
    The *defaults* object used when initialising objects without explicit arguments.

    .. ipython:: python

       from repolib import defaults
       print(defaults.print())

    """

    _instance = None

    modifier: str
    calendar: str
    spot_lag: int

    convention: str
    notional: float

    curve_convention: str
    interpolation: str
    value_type: str
    min_gap_in_days: int
    date_order_action: str

    max_iter: int
    func_tol: float
    conv_tol: float
    solver_log: bool
    missing_jacobian: str

    headers: dict[str, str]
    spec: dict[str, dict[str, Any]]

    def __new__(cls) -> Defaults:
        if cls._instance is None:
            # Singleton pattern creates only one instance
            cls._instance = super(Defaults, cls).__new__(cls)  # noqa: UP008

            for k, v in DEFAULTS.items():
                setattr(cls._instance, k, deepcopy(v))

        return cls._instance

    def reset_defaults(self) -> None:
        """
        Revert defaults back to their initialisation status.

        Examples
        --------
        .. ipython:: python

           from repolib import defaults
           defaults.reset_defaults()
        """
        for k, v in DEFAULTS.items():
            setattr(self, k, deepcopy(v))

    def print(self) -> str:
        """
        Return a string representation of the current values in the defaults object.
        """

        def _section(title: str, attributes: list[str]) -> str:
            lines = "".join([f"\t{attr}: {getattr(self, attr)}\n" for attr in attributes])
            return f"{title}:\n\n{lines}"

        return "\n".join(
            [
                _section("Scheduling", ["modifier", "calendar", "spot_lag"]),
                _section("Instruments", ["convention", "notional"]),
                _section(
                    "Curves",
                    [
                        "curve_convention",
                        "interpolation",
                        "value_type",
                        "min_gap_in_days",
                        "date_order_action",
                    ],
                ),
                _section(
                    "Calibration",
                    ["max_iter", "func_tol", "conv_tol", "solver_log", "missing_jacobian"],
                ),
                _section("Miscellaneous", ["headers"]),
            ]
        )


def plot(
    x: list[list[Any]], y: list[list[Any]], labels: list[str] | NoInput = NoInput(0)
) -> PlotOutput:
    labels = _drb([], labels)
    fig, ax = plt.subplots(1, 1)
    lines = []
    for _x, _y in zip(x, y, strict=True):
        (line,) = ax.plot(_x, _y)
        lines.append(line)
    if len(labels) == len(lines):
        ax.legend(lines, labels)

    ax.grid(True)

    if isinstance(x[0][0], datetime):
        months = mdates.MonthLocator()  # type: ignore[no-untyped-call]
        monthsFmt = mdates.DateFormatter("%b-%y")  # type: ignore[no-untyped-call]
        ax.xaxis.set_major_locator(months)
        ax.xaxis.set_major_formatter(monthsFmt)
        fig.autofmt_xdate()
    return fig, ax, lines


__all__ = ["Defaults"]
