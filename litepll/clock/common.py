#
# This file is part of LitePLL.
#
# Copyright (c) 2025 LitePLL Developers
# SPDX-License-Identifier: BSD-2-Clause

"""PLL Divider Search"""

import logging
from collections import namedtuple
from fractions import Fraction

from litepll.gen.common import colorer

# Logging ------------------------------------------------------------------------------------------

def register_clkin_log(logger, freq):
    logger.info("Registering {} of {}.".format(
        colorer("ClkIn"),
        colorer("{:3.2f}MHz".format(freq/1e6))
    ))

def create_clkout_log(logger, name, freq, margin):
    logger.info("Creating {} of {} {}.".format(
        colorer("ClkOut {}".format(name)),
        colorer("{:3.2f}MHz".format(freq/1e6)),
        "(closest)" if margin is None else "(+-{:3.2f}ppm)".format(margin*1e6),
    ))

def compute_config_log(logger, config):
    log    = "Config:\n"
    length = 0
    for name in config.keys():
        if len(name) > length: length = len(name)
    for name, value in config.items():
        if "freq" in name or "vco" in name:
            value = "{:3.2f}MHz".format(float(value)/1e6)
        log += "{}{}: {}\n".format(name, " "*(length-len(name)), value)
    log = log[:-1]
    logger.info(log)

# Data Model ---------------------------------------------------------------------------------------

def check_divider_range(name, divider_range):
    try:
        start, stop = divider_range
    except (TypeError, ValueError):
        raise ValueError("{} must be a (start, stop) pair, not {!r}".format(name, divider_range))
    if not isinstance(start, int) or not isinstance(stop, int):
        raise ValueError("{} {!r} must hold integers".format(name, divider_range))
    if start < 1 or stop <= start:
        raise ValueError("{} {!r} must be a non-empty range of positive dividers".format(
            name, divider_range))


_ClockParameters = namedtuple("ClockParameters", [
    "input_frequency_hz",
    "min_reference_frequency_hz",
    "vco_min_hz",
    "vco_max_hz",
    "reference_divider_range",
    "feedback_divider_range",
    "post_divider_range",
    "low_vco",
], defaults=(False,))

class ClockParameters(_ClockParameters):
    """Fixed hardware constraints of a PLL.

    Divider ranges are half-open ``(start, stop)`` pairs, as passed to ``range()``.
    With ``low_vco`` the search prefers the lowest VCO frequency among equally good
    solutions (lower power, more jitter) instead of the highest.
    """
    __slots__ = ()

    def __new__(cls, *args, **kwargs):
        self = super().__new__(cls, *args, **kwargs)
        if self.input_frequency_hz <= 0:
            raise ValueError("Input frequency must be positive, not {}".format(
                self.input_frequency_hz))
        if self.min_reference_frequency_hz <= 0:
            raise ValueError("Minimum reference frequency must be positive, not {}".format(
                self.min_reference_frequency_hz))
        if self.vco_min_hz >= self.vco_max_hz:
            raise ValueError("VCO range ({}, {}) is empty".format(self.vco_min_hz, self.vco_max_hz))
        check_divider_range("reference_divider_range", self.reference_divider_range)
        check_divider_range("feedback_divider_range",  self.feedback_divider_range)
        check_divider_range("post_divider_range",      self.post_divider_range)
        return self

    @classmethod
    def _make(cls, iterable):
        return cls(*iterable)


DividerCandidate = namedtuple("DividerCandidate", [
    "reference_divider",
    "feedback_divider",
    "post_divider_1",
    "post_divider_2",
])


class PLLConfig(namedtuple("PLLConfig", DividerCandidate._fields)):
    __slots__ = ()

    def reference_frequency(self, params):
        return Fraction(params.input_frequency_hz)/self.reference_divider

    def vco_frequency(self, params):
        return self.reference_frequency(params)*self.feedback_divider

    def output_frequency(self, params):
        return self.vco_frequency(params)/(self.post_divider_1*self.post_divider_2)


_EvaluatedCandidate = namedtuple("EvaluatedCandidate", [
    "candidate",
    "reference_frequency_hz",
    "vco_frequency_hz",
    "output_frequency_hz",
    "absolute_error_hz",
])

class EvaluatedCandidate(_EvaluatedCandidate):
    __slots__ = ()

    @property
    def config(self):
        return PLLConfig(*self.candidate)

# Search -------------------------------------------------------------------------------------------

def feasible_candidates(params):
    """Yield every DividerCandidate satisfying the divider, reference and VCO constraints.

    Reference dividers are visited ascending, feedback dividers descending (ascending with
    ``low_vco``) and, for each VCO frequency, post dividers with ``post_divider_1 >=
    post_divider_2``, second stage in the outer loop.
    """
    input_freq = Fraction(params.input_frequency_hz)
    pd_start, pd_stop = params.post_divider_range
    for refdiv in range(*params.reference_divider_range):
        ref_freq = input_freq/refdiv
        if ref_freq < params.min_reference_frequency_hz:
            continue
        fbdivs = range(*params.feedback_divider_range)
        for fbdiv in (fbdivs if params.low_vco else reversed(fbdivs)):
            vco_freq = ref_freq*fbdiv
            if vco_freq < params.vco_min_hz or vco_freq > params.vco_max_hz:
                continue
            for pd2 in range(pd_start, pd_stop):
                for pd1 in range(pd2, pd_stop):
                    yield DividerCandidate(refdiv, fbdiv, pd1, pd2)


def evaluate(candidate, target_frequency_hz, params):
    ref_freq = Fraction(params.input_frequency_hz)/candidate.reference_divider
    vco_freq = ref_freq*candidate.feedback_divider
    out_freq = vco_freq/(candidate.post_divider_1*candidate.post_divider_2)
    return EvaluatedCandidate(
        candidate              = candidate,
        reference_frequency_hz = ref_freq,
        vco_frequency_hz       = vco_freq,
        output_frequency_hz    = out_freq,
        absolute_error_hz      = abs(out_freq - Fraction(target_frequency_hz)),
    )


def _is_better(evaluated, best, low_vco):
    if best is None:
        return True
    if evaluated.absolute_error_hz != best.absolute_error_hz:
        return evaluated.absolute_error_hz < best.absolute_error_hz
    # Equal error: VCO preference, first found otherwise.
    if low_vco:
        return evaluated.vco_frequency_hz < best.vco_frequency_hz
    return evaluated.vco_frequency_hz > best.vco_frequency_hz


def search_evaluated(target_frequency_hz, params, margin=None):
    """Return the EvaluatedCandidate closest to ``target_frequency_hz``, or None.

    ``margin`` is an optional relative tolerance: candidates further than
    ``target_frequency_hz*margin`` from the target are not considered.
    """
    target = Fraction(target_frequency_hz)
    limit  = None if margin is None else target*Fraction(margin)
    best   = None
    for candidate in feasible_candidates(params):
        evaluated = evaluate(candidate, target, params)
        if limit is not None and evaluated.absolute_error_hz > limit:
            continue
        if _is_better(evaluated, best, params.low_vco):
            best = evaluated
    return best


def search(target_frequency_hz, params, margin=None):
    """Return the PLLConfig closest to ``target_frequency_hz``, or None if none is feasible."""
    best = search_evaluated(target_frequency_hz, params, margin)
    if best is None:
        return None
    return best.config

# Generic Clocking ---------------------------------------------------------------------------------

class PLLClocking:
    nclkouts_max = 1

    def __init__(self, params):
        self.params   = params
        self.nclkouts = 0
        self.clkouts  = {}
        self.config   = None
        self.register_clkin(params.input_frequency_hz)

    def register_clkin(self, freq):
        self.params = self.params._replace(input_frequency_hz=freq)
        register_clkin_log(self.logger, freq)

    def create_clkout(self, name, freq, margin=None):
        assert self.nclkouts < self.nclkouts_max
        self.clkouts[self.nclkouts] = (name, freq, margin)
        create_clkout_log(self.logger, name, freq, margin)
        self.nclkouts += 1

    def compute_config(self):
        assert self.nclkouts > 0
        (name, f, m) = self.clkouts[0]
        best = search_evaluated(f, self.params, m)
        if best is None:
            self.logger.warning("No PLL config found for {} of {}.".format(
                colorer("ClkOut {}".format(name)),
                colorer("{:3.2f}MHz".format(f/1e6), color="red")))
            return None
        self.config = best.config
        compute_config_log(self.logger, {
            "refdiv"       : self.config.reference_divider,
            "fbdiv"        : self.config.feedback_divider,
            "post_div1"    : self.config.post_divider_1,
            "post_div2"    : self.config.post_divider_2,
            "vco"          : best.vco_frequency_hz,
            "clkout0_freq" : best.output_frequency_hz,
        })
        return self.config
