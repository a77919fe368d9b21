"""
Symbol -- read-only view of an engine computation graph, and the entry
point for binding it to arrays.
"""

from . import _ffi
from .base import HandleBase, MXNetError
from .bind import BindOptions, bind
from .errors import GraphCopyError, GraphIntrospectionError


class Symbol(HandleBase):
    """Owning wrapper around an engine symbol handle.

    The graph itself is built elsewhere; this class only queries it,
    copies it and binds it.
    """

    _free_fn = 'symbol_free'

    def __init__(self, handle, *, engine=None):
        super().__init__(handle, engine or _ffi.get_engine())

    def _query(self, what, fn):
        if self.freed:
            raise GraphIntrospectionError(f'cannot {what}: symbol has been freed')
        try:
            return fn(self._handle)
        except MXNetError as err:
            raise GraphIntrospectionError(f'{what} failed: {err}') from err

    # ── Introspection ────────────────────────────────────────────────

    @property
    def name(self):
        """Name of a single-output symbol; None for grouped symbols."""
        name, found = self._query('get name', self._engine.symbol_get_name)
        return name if found else None

    def list_arguments(self):
        """Names of the arguments required to compute the symbol.

        Example:
            >>> c = a + b
            >>> c.list_arguments()
            ['a', 'b']
        """
        return self._query('list arguments', self._engine.symbol_list_arguments)

    def list_auxiliary_states(self):
        """Names of the auxiliary states.

        Auxiliary states are not updated by gradient descent, e.g. the
        moving mean and variance of BatchNorm. Most operators have none.
        """
        return self._query('list auxiliary states',
                           self._engine.symbol_list_auxiliary_states)

    def list_outputs(self):
        """Names of all outputs; one per member for grouped symbols."""
        return self._query('list outputs', self._engine.symbol_list_outputs)

    # ── Copy ─────────────────────────────────────────────────────────

    def dup(self):
        """Deep copy of the graph under a new handle."""
        if self.freed:
            raise GraphCopyError('cannot copy: symbol has been freed')
        try:
            handle = self._engine.symbol_copy(self._handle)
            return Symbol(handle, engine=self._engine)
        except MXNetError as err:
            raise GraphCopyError(f'copy failed: {err}') from err

    def __copy__(self):
        return self.dup()

    def __deepcopy__(self, memo):
        return self.dup()

    # ── Bind ─────────────────────────────────────────────────────────

    def bind(self, ctx, args, args_grad=None, grad_req='write',
             aux_states=None, group2ctx=None, shared_exec=None):
        """Bind the symbol to arrays and return an Executor.

        Args:
            ctx: Context the executor runs on.
            args: Argument arrays, a list in ``list_arguments()`` order or
                a dict of name to NDArray. Every argument is required.
            args_grad: Gradient arrays in the same forms; missing names
                get no gradient buffer.
            grad_req: "null", "write" or "add", a list of labels, or a
                dict of name to label (unnamed arguments get "null").
            aux_states: Auxiliary state arrays, a list in
                ``list_auxiliary_states()`` order or a dict.
            group2ctx: Dict of context-group name to Context.
            shared_exec: Executor to share memory with.
        """
        options = BindOptions(args_grad=args_grad, grad_req=grad_req,
                              aux_states=aux_states, group2ctx=group2ctx,
                              shared_exec=shared_exec)
        return bind(self, ctx, args, options)

    def __repr__(self):
        if self.freed:
            return '<Symbol freed>'
        name = self.name
        if name is not None:
            return f'<Symbol {name}>'
        return f'<Symbol group [{", ".join(self.list_outputs())}]>'
