# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Process exit codes.

Exit codes:
    0 - LOW: risk band low
    1 - ERROR: failed before a report was produced
    2 - MEDIUM: risk band medium
    3 - HIGH: risk band high
"""

from __future__ import annotations

from enum import IntEnum

from promptwall.core.constants import RiskBand


class ExitCode(IntEnum):
    LOW = 0
    ERROR = 1
    MEDIUM = 2
    HIGH = 3


_BAND_MAP: dict[RiskBand, ExitCode] = {
    RiskBand.LOW: ExitCode.LOW,
    RiskBand.MEDIUM: ExitCode.MEDIUM,
    RiskBand.HIGH: ExitCode.HIGH,
}


def band_to_exit_code(band: RiskBand) -> ExitCode:
    return _BAND_MAP[band]
