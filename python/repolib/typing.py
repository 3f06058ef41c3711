# This module is reserved only for typing purposes.
# It avoids all circular import by performing a TYPE_CHECKING check on any component.

from collections.abc import Callable as Callable
from collections.abc import Mapping as Mapping
from collections.abc import Sequence as Sequence
from datetime import datetime as datetime
from typing import Any as Any
from typing import NoReturn as NoReturn
from typing import TypeAlias

import numpy as np
from pandas import DataFrame as DataFrame
from pandas import Series as Series
from pandas.tseries.offsets import CustomBusinessDay

from repolib.enums.generics import NoInput as NoInput
from repolib.instruments import ResolvedBill as ResolvedBill
from repolib.instruments import ResolvedBillTrade as ResolvedBillTrade
from repolib.instruments import ResolvedRepo as ResolvedRepo
from repolib.instruments import ResolvedRepoTrade as ResolvedRepoTrade

CalInput: TypeAlias = "CustomBusinessDay | str | NoInput"

# https://stackoverflow.com/questions/68916893/
Arr1dF64: TypeAlias = "np.ndarray[tuple[int], np.dtype[np.float64]]"
Arr2dF64: TypeAlias = "np.ndarray[tuple[int, int], np.dtype[np.float64]]"

str_: TypeAlias = "str | NoInput"
int_: TypeAlias = "int | NoInput"
float_: TypeAlias = "float | NoInput"
datetime_: TypeAlias = "datetime | NoInput"

ResolvedProduct: TypeAlias = "ResolvedRepo | ResolvedBill"
ResolvedTrade: TypeAlias = "ResolvedRepoTrade | ResolvedBillTrade"

ValueFunction: TypeAlias = "Callable[[Arr1dF64], Arr1dF64]"
DerivativeFunction: TypeAlias = "Callable[[Arr1dF64], Arr2dF64]"
