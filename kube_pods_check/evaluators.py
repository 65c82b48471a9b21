#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import enum
from dataclasses import dataclass
from typing import NamedTuple


class State(enum.IntEnum):
    """Monitoring states, valued by their plug-in exit code"""

    OK = 0
    WARN = 1
    CRIT = 2
    UNKNOWN = 3

    @property
    def label(self) -> str:
        return _STATE_LABELS[self]


_STATE_LABELS = {
    State.OK: "OK",
    State.WARN: "Warning",
    State.CRIT: "Critical",
    State.UNKNOWN: "Unknown",
}


@dataclass(frozen=True)
class Finding:
    state: State
    message: str

    @property
    def text(self) -> str:
        """
        >>> Finding(State.WARN, "Pod: web-1  Ready: False").text
        'Warning: Pod: web-1  Ready: False'
        """
        return f"{self.state.label}: {self.message}"


class RestartLevels(NamedTuple):
    warn: int
    crit: int


def evaluate_condition(
    pod_name: str, condition_type: str, status: str, verbose: bool
) -> Finding | None:
    """Any condition status other than the exact string "True" is a warning

    >>> evaluate_condition("web-1", "Ready", "Unknown", verbose=False)
    Finding(state=<State.WARN: 1>, message='Pod: web-1  Ready: Unknown')
    >>> evaluate_condition("web-1", "Ready", "True", verbose=False) is None
    True
    """
    message = f"Pod: {pod_name}  {condition_type}: {status}"
    if status != "True":
        return Finding(State.WARN, message)
    if verbose:
        return Finding(State.OK, message)
    return None


def evaluate_restarts(
    pod_name: str,
    container_name: str,
    ready_text: str,
    restart_count: int,
    levels: RestartLevels,
) -> Finding | None:
    """Classify the restart count of one container

    Both levels are exclusive: a count equal to the warning or the critical
    level is OK. Containers which never restarted yield no finding at all.

    >>> evaluate_restarts("web-1", "app", "true", 50, RestartLevels(5, 50))
    Finding(state=<State.OK: 0>, message='Pod: web-1   Container: app    Ready: true   Restarts: 50')
    """
    message = (
        f"Pod: {pod_name}   Container: {container_name}    Ready: {ready_text}"
        f"   Restarts: {restart_count}"
    )
    if levels.warn < restart_count < levels.crit:
        return Finding(State.WARN, message)
    if restart_count > levels.crit:
        return Finding(State.CRIT, message)
    if restart_count > 0:
        return Finding(State.OK, message)
    return None
