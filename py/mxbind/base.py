"""Native-call error checking and the owning handle wrapper."""


class MXNetError(RuntimeError):
    """Raised when a libmxnet call returns a non-zero status."""


def check_call(ret, last_error):
    """Raise MXNetError if ``ret`` is non-zero.

    ``last_error`` is called only on failure and returns the engine's
    message for the most recent error.
    """
    if ret != 0:
        raise MXNetError(f'{last_error()} (ret={ret})')


class HandleBase:
    """Owns one native handle and releases it exactly once.

    Subclasses set ``_free_fn`` to the engine method that releases their
    handle kind.
    """

    _free_fn = None

    def __init__(self, handle, engine):
        if not handle:
            raise MXNetError(f'Failed to create {type(self).__name__} (NULL handle)')
        self._handle = handle
        self._engine = engine

    @property
    def handle(self):
        return self._handle

    @property
    def engine(self):
        return self._engine

    @property
    def freed(self):
        return self._handle is None

    def free(self):
        if self._handle is not None:
            handle, self._handle = self._handle, None
            getattr(self._engine, self._free_fn)(handle)

    def __del__(self):
        if getattr(self, '_handle', None) is not None:
            self.free()
