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

import os

import pandas as pd


def _parse_conventions(df: pd.DataFrame) -> dict[str, dict[str, str | int]]:
    """convert the conventions table into a dict of kwargs keyed by upper case name"""
    df = df.astype({"spot_lag": int})
    df["name"] = df["name"].str.upper()
    df["currency"] = df["currency"].str.lower()
    return {
        name: {k: (int(v) if k == "spot_lag" else str(v)) for k, v in row.items()}
        for name, row in df.set_index("name").to_dict(orient="index").items()
    }


path = "data/repo_conventions.csv"
abspath = os.path.dirname(os.path.abspath(__file__))
target = os.path.join(abspath, path)
df = pd.read_csv(target, dtype=str)

REPO_CONVENTIONS = _parse_conventions(df)
