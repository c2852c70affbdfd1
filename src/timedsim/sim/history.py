"""
Per-frame records of the car/camera simulation.

Values are stored as plain floats after the simulation has checked their
times, so records can be exported and plotted freely.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Iterator

import numpy as np


@dataclass
class FrameRecord:
    """Snapshot of one frame's outputs."""

    frame_time: float  # Start of the frame
    frame_step: float  # Length of the frame
    car_time: float  # Time the interpolated car state is valid at
    car_pos: float
    car_vel: float
    camera_pos: float
    substeps: int  # Fixed physics steps run this frame
    alpha: float | None  # Interpolation factor, None if physics didn't step


@dataclass
class FrameHistory:
    """Append-only list of frame records."""

    records: list[FrameRecord] = field(default_factory=list)

    def append(self, record: FrameRecord) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FrameRecord]:
        return iter(self.records)

    @property
    def last(self) -> FrameRecord | None:
        return self.records[-1] if self.records else None

    def as_arrays(self) -> dict[str, np.ndarray]:
        """
        Return one numpy array per record field.

        A missing alpha (no physics step that frame) becomes NaN.
        """
        arrays = {}
        for f in fields(FrameRecord):
            column = [getattr(r, f.name) for r in self.records]
            if f.name == "substeps":
                arrays[f.name] = np.array(column, dtype=np.int64)
            else:
                arrays[f.name] = np.array(
                    [np.nan if v is None else v for v in column], dtype=np.float64
                )
        return arrays
