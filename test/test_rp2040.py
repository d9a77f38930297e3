#
# This file is part of LitePLL.
#
# Copyright (c) 2025 LitePLL Developers
# SPDX-License-Identifier: BSD-2-Clause

import unittest

from litepll.clock.common import PLLConfig
from litepll.clock.rp2040 import *


class TestPLLConfig(unittest.TestCase):
    # (kHz, REFDIV, FBDIV, PD1, PD2, VCO MHz)
    reference_configs = [
        (480_000, 1, 120, 3, 1, 1440),
        (250_000, 1, 125, 6, 1, 1500),
        (176_000, 1, 132, 3, 3, 1584),
        (130_000, 1, 130, 6, 2, 1560),
        (125_000, 1, 125, 6, 2, 1500),
        ( 48_000, 1, 120, 6, 5, 1440),
        ( 32_000, 1, 112, 7, 6, 1344),
        ( 20_000, 1,  70, 7, 6,  840),
    ]

    def test_reference_configs(self):
        for freq_khz, refdiv, fbdiv, pd1, pd2, vco_mhz in self.reference_configs:
            with self.subTest(freq_khz=freq_khz):
                config = pll_config(freq_khz)
                self.assertEqual(config, PLLConfig(refdiv, fbdiv, pd1, pd2))
                self.assertEqual(config.vco_frequency(RP2040_PLL_PARAMETERS), vco_mhz*1_000_000)
                self.assertEqual(config.output_frequency(RP2040_PLL_PARAMETERS), freq_khz*1000)

    def test_cached(self):
        self.assertIs(pll_config(133_000), pll_config(133_000))

    def test_invalid_literal(self):
        for freq_khz in [0, -125_000, 125_000.0, 1.5, True, "125000", None, [125_000]]:
            with self.subTest(freq_khz=freq_khz):
                with self.assertRaises(ValueError):
                    pll_config(freq_khz)

    def test_absent(self):
        params = RP2040_PLL_PARAMETERS._replace(vco_min_hz=4000_000_000, vco_max_hz=5000_000_000)
        self.assertIsNone(pll_config(125_000, params))

    def test_hal_config(self):
        self.assertEqual(hal_config(pll_config(480_000)), RP2040PLLConfig(
            vco_freq  = 1440_000_000,
            refdiv    = 1,
            post_div1 = 3,
            post_div2 = 1,
        ))
        self.assertIsNone(hal_config(None))

    def test_hal_config_rounds_vco(self):
        # 12 MHz / 7 * 320 = 548.571428... MHz
        config = PLLConfig(7, 320, 1, 1)
        self.assertEqual(hal_config(config).vco_freq, 548_571_429)


class TestRP2040PLL(unittest.TestCase):
    def test_compute_config(self):
        with self.assertLogs("RP2040PLL", level="INFO") as logs:
            pll = RP2040PLL()
            pll.create_clkout("sys", 125e6)
            config = pll.compute_config()
        self.assertEqual(config, PLLConfig(1, 125, 6, 2))
        self.assertEqual(pll.config, config)
        self.assertEqual(pll.hal_config(), RP2040PLLConfig(1500_000_000, 1, 6, 2))
        self.assertTrue(any("Config:" in line for line in logs.output))

    def test_register_clkin(self):
        pll = RP2040PLL()
        with self.assertLogs("RP2040PLL", level="INFO") as logs:
            pll.register_clkin(6_000_000)
        self.assertIn("ClkIn", logs.output[0])
        self.assertEqual(pll.params.input_frequency_hz, 6_000_000)
        pll.create_clkout("sys", 480e6)
        self.assertEqual(pll.compute_config(), PLLConfig(1, 240, 3, 1))

    def test_register_clkin_invalid(self):
        pll = RP2040PLL()
        with self.assertRaises(ValueError):
            pll.register_clkin(0)

    def test_single_clkout(self):
        pll = RP2040PLL()
        pll.create_clkout("sys", 125e6)
        with self.assertRaises(AssertionError):
            pll.create_clkout("usb", 48e6)

    def test_low_vco(self):
        pll = RP2040PLL(low_vco=True)
        pll.create_clkout("sys", 480e6)
        self.assertEqual(pll.compute_config(), PLLConfig(1, 80, 2, 1))

    def test_locked_refdiv(self):
        pll = RP2040PLL(locked_refdiv=2)
        self.assertEqual(pll.params.reference_divider_range, (2, 3))
        pll.create_clkout("sys", 480e6)
        self.assertEqual(pll.compute_config(), PLLConfig(2, 240, 3, 1))

    def test_locked_refdiv_too_slow(self):
        # 12 MHz / 3 is below the 5 MHz minimum reference frequency.
        pll = RP2040PLL(locked_refdiv=3)
        pll.create_clkout("sys", 125e6)
        with self.assertLogs("RP2040PLL", level="WARNING"):
            self.assertIsNone(pll.compute_config())

    def test_locked_refdiv_out_of_range(self):
        with self.assertRaises(ValueError):
            RP2040PLL(locked_refdiv=64)
        with self.assertRaises(ValueError):
            RP2040PLL(locked_refdiv=0)

    def test_locked_refdiv_range(self):
        self.assertEqual(locked_refdiv_range(2), (2, 3))
        self.assertEqual(locked_refdiv_range(63), (63, 64))
        for locked_refdiv in [0, 64, True, 2.0]:
            with self.subTest(locked_refdiv=locked_refdiv):
                with self.assertRaises(ValueError):
                    locked_refdiv_range(locked_refdiv)

    def test_no_config_within_margin(self):
        pll = RP2040PLL()
        pll.create_clkout("sys", 1e6, margin=1e-2)
        with self.assertLogs("RP2040PLL", level="WARNING") as logs:
            self.assertIsNone(pll.compute_config())
        self.assertIn("No PLL config found", logs.output[0])
        self.assertIsNone(pll.config)
