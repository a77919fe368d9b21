"""Executor -- a symbol bound to concrete arrays on a device."""

from .base import HandleBase


class Executor(HandleBase):
    """Opaque execution plan returned by ``Symbol.bind``.

    Keeps the resolved argument, gradient and auxiliary tables so callers
    can inspect or update the bound arrays. Entries of ``grad_arrays``
    are None for arguments bound without a gradient buffer.
    """

    _free_fn = 'executor_free'

    def __init__(self, handle, symbol, ctx, grad_req, group2ctx,
                 arg_arrays, grad_arrays, aux_arrays):
        super().__init__(handle, symbol.engine)
        self.symbol = symbol
        self.ctx = ctx
        self.grad_req = grad_req
        self.group2ctx = group2ctx
        self.arg_arrays = arg_arrays
        self.grad_arrays = grad_arrays
        self.aux_arrays = aux_arrays

    # ── Name-keyed views ─────────────────────────────────────────────

    @property
    def arg_dict(self):
        return dict(zip(self.symbol.list_arguments(), self.arg_arrays))

    @property
    def grad_dict(self):
        return dict(zip(self.symbol.list_arguments(), self.grad_arrays))

    @property
    def aux_dict(self):
        return dict(zip(self.symbol.list_auxiliary_states(), self.aux_arrays))

    def __repr__(self):
        return f'<Executor {self.symbol!r} on {self.ctx!r}>'
