#!/usr/bin/env python3

#
# This file is part of LitePLL.
#
# Copyright (c) 2025 LitePLL Developers
# SPDX-License-Identifier: BSD-2-Clause

import sys
import logging
import argparse

from rich import print

from litepll.clock.common import ClockParameters, search_evaluated
from litepll.clock.rp2040 import RP2040_PLL_PARAMETERS, check_freq_khz, locked_refdiv_range
from litepll.integration.export import get_pll_header

def mhz_to_hz(freq):
    return int(round(freq*1e6))

def main(argv=None):
    defaults = RP2040_PLL_PARAMETERS
    parser = argparse.ArgumentParser(description="LitePLL divider calculator.")
    parser.add_argument("--input",   default=defaults.input_frequency_hz/1e6,         type=float, help="Input (reference) frequency in MHz.")
    parser.add_argument("--ref-min", default=defaults.min_reference_frequency_hz/1e6, type=float, help="Minimum reference frequency in MHz.")
    parser.add_argument("--vco-min", default=defaults.vco_min_hz/1e6,                 type=float, help="Minimum VCO frequency in MHz.")
    parser.add_argument("--vco-max", default=defaults.vco_max_hz/1e6,                 type=float, help="Maximum VCO frequency in MHz.")
    parser.add_argument("--low-vco", action="store_true", help="Prefer a lower VCO frequency (less power, more jitter).")
    parser.add_argument("--locked-refdiv", default=None, type=int, help="Only use this REFDIV.")
    parser.add_argument("--margin",  default=None, type=float, help="Reject results further than this relative error.")
    parser.add_argument("--name",    default="sys", help="PLL name used in the generated header.")
    parser.add_argument("--header",  action="store_true", help="Print a C header instead of a summary.")
    parser.add_argument("--verbose", action="store_true", help="Enable info logging.")
    parser.add_argument("freq", type=int, help="Output frequency in kHz.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        check_freq_khz(args.freq)
        refdiv_range = defaults.reference_divider_range
        if args.locked_refdiv is not None:
            refdiv_range = locked_refdiv_range(args.locked_refdiv, defaults)
        params = ClockParameters(
            input_frequency_hz         = mhz_to_hz(args.input),
            min_reference_frequency_hz = mhz_to_hz(args.ref_min),
            vco_min_hz                 = mhz_to_hz(args.vco_min),
            vco_max_hz                 = mhz_to_hz(args.vco_max),
            reference_divider_range    = refdiv_range,
            feedback_divider_range     = defaults.feedback_divider_range,
            post_divider_range         = defaults.post_divider_range,
            low_vco                    = args.low_vco,
        )
    except ValueError as e:
        parser.error(str(e))

    best = search_evaluated(args.freq*1000, params, args.margin)
    if args.header:
        sys.stdout.write(get_pll_header({args.name: None if best is None else best.config}, params))
        return 0 if best is not None else 1

    print("Requested: {} MHz".format(args.freq/1e3))
    if best is None:
        print("No PLL configuration found.")
        return 1
    config = best.config
    print("Achieved: {} MHz".format(float(best.output_frequency_hz)/1e6))
    print("REFDIV: {}".format(config.reference_divider))
    print("FBDIV: {} (VCO = {} MHz)".format(config.feedback_divider, float(best.vco_frequency_hz)/1e6))
    print("PD1: {}".format(config.post_divider_1))
    print("PD2: {}".format(config.post_divider_2))
    return 0

if __name__ == "__main__":
    sys.exit(main())
