"""Context -- device placement for bound executors."""


class Context:
    """A (device_type, device_id) pair.

    Usage:
        ctx = Context('gpu', 1)
        ctx.device_type_id          # => 2
        Context.from_type_id(2, 1)  # == ctx
    """

    devtype2id = {'cpu': 1, 'gpu': 2, 'cpu_pinned': 3, 'cpu_shared': 5}
    devid2type = {v: k for k, v in devtype2id.items()}

    def __init__(self, device_type, device_id=0):
        if device_type not in self.devtype2id:
            raise ValueError(
                f'unknown device type {device_type!r}, '
                f'expected one of {sorted(self.devtype2id)}')
        if not isinstance(device_id, int) or device_id < 0:
            raise ValueError(f'device_id must be a non-negative int, got {device_id!r}')
        self._device_type = device_type
        self._device_id = device_id

    @classmethod
    def from_type_id(cls, device_type_id, device_id=0):
        if device_type_id not in cls.devid2type:
            raise ValueError(f'unknown device type id {device_type_id!r}')
        return cls(cls.devid2type[device_type_id], device_id)

    @property
    def device_type(self):
        return self._device_type

    @property
    def device_type_id(self):
        return self.devtype2id[self._device_type]

    @property
    def device_id(self):
        return self._device_id

    def __eq__(self, other):
        if not isinstance(other, Context):
            return NotImplemented
        return (self.device_type_id, self.device_id) == (other.device_type_id, other.device_id)

    def __hash__(self):
        return hash((self.device_type_id, self.device_id))

    def __repr__(self):
        return f'{self._device_type}({self._device_id})'


def cpu(device_id=0):
    return Context('cpu', device_id)


def gpu(device_id=0):
    return Context('gpu', device_id)
