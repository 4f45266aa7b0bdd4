from __future__ import annotations

from typing import TypeAlias

import numpy as np
from jaxtyping import Float

NpPoint: TypeAlias = Float[np.ndarray, "2"]
NpPolyline: TypeAlias = Float[np.ndarray, "N 2"]
