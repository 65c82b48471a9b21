#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Sequence
from dataclasses import dataclass

from .evaluators import Finding, State

HEADLINES = {
    State.OK: "OK - Kubernetes pods are all OK",
    State.WARN: "WARNING - One or more pods show warning status!",
    State.CRIT: "CRITICAL - One or more pods show critical status!",
    State.UNKNOWN: "UNKNOWN - One or more pods show unknown status!",
}

CONNECTION_FAILED_HEADLINE = "CRITICAL - unable to connect to kubernetes cluster!"


@dataclass(frozen=True)
class ScanResult:
    state: State
    report_lines: Sequence[str]

    @property
    def headline(self) -> str:
        return HEADLINES[self.state]

    def render(self) -> str:
        """Plug-in output: the headline followed by one line per finding

        >>> print(ScanResult(State.WARN, ["Warning: b", "OK: a"]).render())
        WARNING - One or more pods show warning status!
        Warning: b
        OK: a
        """
        return "\n".join([self.headline, *self.report_lines])


class ResultAggregator:
    """Collects the findings of one scan

    The findings are reported in reverse order of discovery, the latest
    finding comes first.
    """

    def __init__(self) -> None:
        self._state = State.OK
        self._lines: list[str] = []

    @property
    def state(self) -> State:
        return self._state

    def record(self, state: State, message: str) -> None:
        self._lines.insert(0, Finding(state, message).text)
        self._state = self._escalate(self._state, state)

    @staticmethod
    def _escalate(current: State, new: State) -> State:
        """
        Known quirk: the states are not simply ordered by their exit code.
        WARN and UNKNOWN only replace OK, so once either of them is set, the
        other one is ignored. CRIT always wins.

        >>> ResultAggregator._escalate(State.UNKNOWN, State.WARN)
        <State.UNKNOWN: 3>
        >>> ResultAggregator._escalate(State.UNKNOWN, State.CRIT)
        <State.CRIT: 2>
        """
        if new is State.CRIT:
            return State.CRIT
        if new in (State.WARN, State.UNKNOWN) and current is State.OK:
            return new
        return current

    def finalize(self) -> ScanResult:
        return ScanResult(state=self._state, report_lines=tuple(self._lines))
