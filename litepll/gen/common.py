#
# This file is part of LitePLL.
#
# Copyright (c) 2025 LitePLL Developers
# SPDX-License-Identifier: BSD-2-Clause

# Coloring Helpers ---------------------------------------------------------------------------------

def colorer(s, color="bright"):
    header  = {
        "bright"   : "\x1b[1m",
        "green"    : "\x1b[32m",
        "cyan"     : "\x1b[36m",
        "red"      : "\x1b[31m",
        "yellow"   : "\x1b[33m",
        "underline": "\x1b[4m"}[color]
    trailer = "\x1b[0m"
    return header + str(s) + trailer
