"""mxbind -- Python frontend for binding MXNet symbols to arrays."""

from ._ffi import NativeEngine, get_engine, set_engine
from .base import MXNetError
from .bind import BindOptions, bind
from .context import Context, cpu, gpu
from .errors import (
    ArityMismatchError,
    GraphCopyError,
    GraphIntrospectionError,
    InvalidContextError,
    InvalidRequirementError,
    InvalidRequirementTypeError,
    MissingArgumentError,
    MXBindError,
    PlanConstructionError,
    TypeMismatchError,
    UnsupportedInputShapeError,
)
from .executor import Executor
from .ndarray import NDArray
from .resolve import GradReq
from .symbol import Symbol

__all__ = [
    'Symbol', 'Executor', 'NDArray', 'Context', 'cpu', 'gpu', 'GradReq',
    'BindOptions', 'bind', 'NativeEngine', 'get_engine', 'set_engine',
    'MXNetError', 'MXBindError', 'GraphIntrospectionError', 'GraphCopyError',
    'PlanConstructionError', 'ArityMismatchError', 'MissingArgumentError',
    'TypeMismatchError', 'UnsupportedInputShapeError', 'InvalidRequirementError',
    'InvalidRequirementTypeError', 'InvalidContextError',
]
__version__ = '0.0.1'
