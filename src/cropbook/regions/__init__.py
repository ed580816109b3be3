"""
Region capture: gesture state machine, per-page region sets and the
geometry shared by the stamp and gallery stages.
"""

from .geometry import Point, RectAnnotation, RectLocation
from .region_set import RegionSet
from .capture import CaptureState, RegionCapture
from .input import GestureInput, Touch, to_page_fraction

__all__ = [
    'Point',
    'RectAnnotation',
    'RectLocation',
    'RegionSet',
    'CaptureState',
    'RegionCapture',
    'GestureInput',
    'Touch',
    'to_page_fraction',
]
