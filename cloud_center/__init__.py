from .model import (
    CandidateVertex,
    CorruptDataError,
    CubeState,
    InvalidInputError,
    Point,
    RoundRecord,
    SearchResult,
    as_cloud_array,
    lattice_index,
)
from .config import SearchConfig, get_search_config, set_search_config
from .evaluator import DistanceEvaluator, distance_sum
from .search import RefinementController, find_center, search
from .source import ArrayPointCloudSource, CachedRandomCloudSource, PointCloudSource
from .validate import validate_cloud, validate_search_inputs

__all__ = [
    'ArrayPointCloudSource',
    'CachedRandomCloudSource',
    'CandidateVertex',
    'CorruptDataError',
    'CubeState',
    'DistanceEvaluator',
    'InvalidInputError',
    'Point',
    'PointCloudSource',
    'RefinementController',
    'RoundRecord',
    'SearchConfig',
    'SearchResult',
    'as_cloud_array',
    'distance_sum',
    'find_center',
    'get_search_config',
    'lattice_index',
    'search',
    'set_search_config',
    'validate_cloud',
    'validate_search_inputs',
]
