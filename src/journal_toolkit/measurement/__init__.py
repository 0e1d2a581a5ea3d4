"""
Module: measurement

Purpose:
    Height measurement for pagination. All blocks are measured before
    pagination runs; a failure anywhere invalidates the whole pass.

Key Functions:
    - measure_blocks(): All-or-nothing block measurement
    - compute_geometry(): PageGeometry from template and measured chrome

Key Classes:
    - MeasurementOracle: Abstract height provider
    - StaticOracle: Synthetic heights
    - ReportLabOracle: reportlab-backed heights (points)
    - MeasurementError: Measurement failure

Dependencies:
    - reportlab: Text metrics (ReportLabOracle)

Used By:
    - controller: Layout pipeline
    - layout.session: Background re-pagination
"""

from ..layout.config import column_width_pt, content_width_pt
from .oracle import (
    MeasurementError,
    MeasurementOracle,
    StaticOracle,
    compute_geometry,
    measure_blocks,
)
from .reportlab_oracle import ReportLabOracle

__all__ = [
    # Oracles
    "MeasurementOracle",
    "StaticOracle",
    "ReportLabOracle",
    "MeasurementError",
    # Functions
    "measure_blocks",
    "compute_geometry",
    "content_width_pt",
    "column_width_pt",
]
