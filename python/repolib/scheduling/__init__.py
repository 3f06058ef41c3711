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

from repolib.scheduling.calendars import (
    CALENDARS,
    add_business_days,
    add_tenor,
    adjust,
    create_calendar,
    get_calendar,
    is_business_day,
    tenor_year_fraction,
)
from repolib.scheduling.dcfs import dcf

__all__ = [
    "CALENDARS",
    "add_business_days",
    "add_tenor",
    "adjust",
    "create_calendar",
    "dcf",
    "get_calendar",
    "is_business_day",
    "tenor_year_fraction",
]
