from .types import (
    AXIS_KINDS,
    TOOLS,
    AxisKind,
    BoundaryQuad,
    DegenerateQuadError,
    DescriptionFormatError,
    DieToyError,
    EmptyIndexError,
    IndexOutOfRangeError,
    InvalidSelectionError,
    Point2D,
    ProjectionError,
    QuadOrderingError,
    Segment,
    StaleDerivedStateError,
    Tool,
)
from .config import EngineConfig, get_engine_config, set_engine_config
from .geometry import point_in_polygon, segment_intersect, segment_point_distance
from .ordering import order_quad_points
from .homography import UNIT_SQUARE, Homography, build_homography
from .slices import SliceAxis
from .grid import bit_coordinates, build_bit_locations, build_slice_lines, grid_shape, slice_segment
from .proximity import ProximityIndex
from .description import (
    FILE_TYPE,
    FORMAT_VERSION,
    DieDescription,
    dump_description,
    load_description,
    parse_description,
    save_description,
)
from .session import DieSession, SliceLine

__all__ = [
    'AXIS_KINDS',
    'TOOLS',
    'AxisKind',
    'BoundaryQuad',
    'Point2D',
    'Segment',
    'Tool',
    'DieToyError',
    'DegenerateQuadError',
    'QuadOrderingError',
    'ProjectionError',
    'InvalidSelectionError',
    'IndexOutOfRangeError',
    'EmptyIndexError',
    'StaleDerivedStateError',
    'DescriptionFormatError',
    'EngineConfig',
    'get_engine_config',
    'set_engine_config',
    'point_in_polygon',
    'segment_intersect',
    'segment_point_distance',
    'order_quad_points',
    'UNIT_SQUARE',
    'Homography',
    'build_homography',
    'SliceAxis',
    'slice_segment',
    'build_slice_lines',
    'build_bit_locations',
    'grid_shape',
    'bit_coordinates',
    'ProximityIndex',
    'FILE_TYPE',
    'FORMAT_VERSION',
    'DieDescription',
    'parse_description',
    'dump_description',
    'load_description',
    'save_description',
    'DieSession',
    'SliceLine',
]
