from litepll.clock.common import (
    ClockParameters,
    DividerCandidate,
    EvaluatedCandidate,
    PLLConfig,
    search,
    search_evaluated,
)
from litepll.clock.rp2040 import RP2040_PLL_PARAMETERS, RP2040PLL, pll_config, hal_config
