#
# This file is part of LitePLL.
#
# Copyright (c) 2025 LitePLL Developers
# SPDX-License-Identifier: BSD-2-Clause

import functools
import logging
from collections import namedtuple

from litepll.gen.common import colorer
from litepll.clock.common import *

# Constants ----------------------------------------------------------------------------------------

RP2040_XOSC_FREQ    = 12_000_000
RP2040_REF_FREQ_MIN = 5_000_000
RP2040_VCO_FREQ_MIN = 750_000_000
RP2040_VCO_FREQ_MAX = 1600_000_000

RP2040_PLL_PARAMETERS = ClockParameters(
    input_frequency_hz         = RP2040_XOSC_FREQ,
    min_reference_frequency_hz = RP2040_REF_FREQ_MIN,
    vco_min_hz                 = RP2040_VCO_FREQ_MIN,
    vco_max_hz                 = RP2040_VCO_FREQ_MAX,
    reference_divider_range    = (1,  63+1),
    feedback_divider_range     = (16, 320+1),
    post_divider_range         = (1,  7+1),
)

# Hardware Config ----------------------------------------------------------------------------------

# Fields of the HAL PLL configuration: VCO frequency (Hz) instead of the feedback divider.
RP2040PLLConfig = namedtuple("RP2040PLLConfig", ["vco_freq", "refdiv", "post_div1", "post_div2"])

def hal_config(config, params=RP2040_PLL_PARAMETERS):
    if config is None:
        return None
    return RP2040PLLConfig(
        vco_freq  = round(config.vco_frequency(params)),
        refdiv    = config.reference_divider,
        post_div1 = config.post_divider_1,
        post_div2 = config.post_divider_2,
    )

# Frequency Literal --------------------------------------------------------------------------------

def check_freq_khz(freq_khz):
    if isinstance(freq_khz, bool) or not isinstance(freq_khz, int):
        raise ValueError("Frequency must be an integer number of kHz, not {!r}".format(freq_khz))
    if freq_khz <= 0:
        raise ValueError("Frequency must be positive, not {} kHz".format(freq_khz))

def pll_config(freq_khz, params=RP2040_PLL_PARAMETERS):
    """Return the PLLConfig closest to ``freq_khz`` kHz, or None if none is feasible.

    Results are cached: each frequency is searched once per process.
    """
    check_freq_khz(freq_khz)
    return _cached_search(freq_khz*1000, params)

# Bounded: a firmware build only asks for a handful of frequencies.
@functools.lru_cache(maxsize=256)
def _cached_search(freq, params):
    return search(freq, params)

# Locked REFDIV ------------------------------------------------------------------------------------

def locked_refdiv_range(locked_refdiv, params=RP2040_PLL_PARAMETERS):
    (refdiv_min, refdiv_max) = params.reference_divider_range
    if isinstance(locked_refdiv, bool) or not isinstance(locked_refdiv, int) or \
       not refdiv_min <= locked_refdiv < refdiv_max:
        raise ValueError("Locked REFDIV {!r} is out of range [{}, {}]".format(
            locked_refdiv, refdiv_min, refdiv_max - 1))
    return (locked_refdiv, locked_refdiv + 1)

# RP2040 / PLL -------------------------------------------------------------------------------------

class RP2040PLL(PLLClocking):
    nclkouts_max = 1

    def __init__(self, low_vco=False, locked_refdiv=None):
        self.logger = logging.getLogger("RP2040PLL")
        self.logger.info("Creating RP2040PLL, {}.".format(
            colorer("low VCO" if low_vco else "high VCO")))
        fields = RP2040_PLL_PARAMETERS._asdict()
        fields["low_vco"] = low_vco
        if locked_refdiv is not None:
            fields["reference_divider_range"] = locked_refdiv_range(locked_refdiv)
        PLLClocking.__init__(self, ClockParameters(**fields))

    def hal_config(self):
        return hal_config(self.config, self.params)
