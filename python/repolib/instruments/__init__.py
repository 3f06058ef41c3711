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

from repolib.instruments.bill import Bill, BillTemplate, BillTrade, ResolvedBill, ResolvedBillTrade
from repolib.instruments.nodes import BillCurveNode, RepoCurveNode
from repolib.instruments.repo import (
    Repo,
    RepoConvention,
    RepoTemplate,
    RepoTrade,
    ResolvedRepo,
    ResolvedRepoTrade,
)

__all__ = [
    "Bill",
    "BillCurveNode",
    "BillTemplate",
    "BillTrade",
    "Repo",
    "RepoConvention",
    "RepoCurveNode",
    "RepoTemplate",
    "RepoTrade",
    "ResolvedBill",
    "ResolvedBillTrade",
    "ResolvedRepo",
    "ResolvedRepoTrade",
]
