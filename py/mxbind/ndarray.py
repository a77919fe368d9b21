"""NDArray -- borrowed reference to a device-resident buffer.

Only the handle matters here; storage, shape and data access belong to
the engine.
"""

from . import _ffi
from .base import HandleBase


class NDArray(HandleBase):
    """Owning wrapper around an engine NDArray handle."""

    _free_fn = 'ndarray_free'

    def __init__(self, handle, *, engine=None):
        super().__init__(handle, engine or _ffi.get_engine())

    def __repr__(self):
        state = 'freed' if self.freed else hex(self._handle)
        return f'<NDArray {state}>'


def is_ndarray(obj):
    """True if ``obj`` is a buffer reference the engine can bind."""
    return isinstance(obj, NDArray) and not obj.freed
