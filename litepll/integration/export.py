#
# This file is part of LitePLL.
#
# Copyright (c) 2025 LitePLL Developers
# SPDX-License-Identifier: BSD-2-Clause

import datetime

# Helpers ------------------------------------------------------------------------------------------

def generated_banner(line_comment="//", with_time=False):
    msg = "Auto-generated by LitePLL"
    if with_time:
        msg += " on {}".format(datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
    r = line_comment + "-"*80 + "\n"
    r += line_comment + " " + msg + "\n"
    r += line_comment + "-"*80 + "\n"
    return r

# PLL Header ---------------------------------------------------------------------------------------

def get_pll_header(configs, params, with_time=False):
    """Generate a C header defining the dividers of each named PLL.

    ``configs`` maps a PLL name (``"sys"``, ``"usb"``...) to a PLLConfig, or to None when no
    configuration exists; the latter emits an ``#error`` so the firmware build fails.
    """
    r = generated_banner("//", with_time)
    r += "#ifndef __GENERATED_PLL_H\n#define __GENERATED_PLL_H\n"
    for name, config in configs.items():
        prefix = "PLL_{}".format(name.upper())
        r += "\n/* {} */\n".format(prefix.lower())
        if config is None:
            r += "#error \"No PLL configuration found for {}\"\n".format(prefix)
            continue
        r += "#define {}_REFDIV {}\n".format(prefix, config.reference_divider)
        r += "#define {}_FBDIV {}\n".format(prefix, config.feedback_divider)
        r += "#define {}_VCO_FREQ_HZ {}\n".format(prefix, round(config.vco_frequency(params)))
        r += "#define {}_POSTDIV1 {}\n".format(prefix, config.post_divider_1)
        r += "#define {}_POSTDIV2 {}\n".format(prefix, config.post_divider_2)
        r += "#define {}_FREQ_HZ {}\n".format(prefix, round(config.output_frequency(params)))
    r += "\n#endif\n"
    return r
