"""
Bind orchestration: turn a Symbol plus user inputs into an Executor.

Usage:
    opts = BindOptions(args_grad={'w': gw}, grad_req={'w': 'add'})
    exe = bind(sym, cpu(), {'x': x, 'w': w}, opts)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .base import MXNetError
from .context import Context
from .errors import InvalidContextError, PlanConstructionError, TypeMismatchError
from .executor import Executor
from .resolve import resolve_arrays, resolve_grad_req, resolve_group2ctx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BindOptions:
    """Optional bind inputs.

    Attributes:
        args_grad: Gradient buffers, positional or by name. None binds no
            gradient buffers; names missing from a mapping get none.
        grad_req: "null", "write" or "add" for all arguments, a list with
            one label per argument, or a mapping of name to label
            (unnamed arguments get "null"). None means "write".
        aux_states: Auxiliary state buffers, positional or by name. None
            is an empty list, which only suits symbols without auxiliary
            states.
        group2ctx: Mapping of context-group name to Context, passed to
            the engine as a placement hint.
        shared_exec: Executor whose memory the new executor may reuse.
    """

    args_grad: Optional[Any] = None
    grad_req: Optional[Any] = None
    aux_states: Optional[Any] = None
    group2ctx: Optional[Mapping[str, Context]] = None
    shared_exec: Optional[Executor] = None


def _handles(table):
    return [a.handle if a is not None else None for a in table]


def bind(symbol, ctx, args, options=None):
    """Bind ``symbol`` to ``args`` on ``ctx`` and return an Executor.

    Raises:
        InvalidContextError: ``ctx`` or a group context is not a Context.
        ArityMismatchError, MissingArgumentError, TypeMismatchError,
        UnsupportedInputShapeError: an array input does not match the
            symbol's declared arguments or auxiliary states.
        InvalidRequirementError, InvalidRequirementTypeError: bad grad_req.
        PlanConstructionError: the engine rejected the request.
    """
    options = options or BindOptions()

    if not isinstance(ctx, Context):
        raise InvalidContextError(
            f'ctx must be a Context, got {type(ctx).__name__}', role='ctx')

    arg_names = symbol.list_arguments()
    arg_arrays = resolve_arrays('args', args, arg_names, allow_missing=False)

    if options.args_grad is None:
        grad_arrays = [None] * len(arg_arrays)
    else:
        grad_arrays = resolve_arrays('args_grad', options.args_grad, arg_names,
                                     allow_missing=True)

    aux_states = [] if options.aux_states is None else options.aux_states
    aux_arrays = resolve_arrays('aux_states', aux_states,
                                symbol.list_auxiliary_states(), allow_missing=False)

    reqs = resolve_grad_req(options.grad_req, arg_names)
    keys, dev_types, dev_ids = resolve_group2ctx(options.group2ctx)

    shared = options.shared_exec
    if shared is not None and not isinstance(shared, Executor):
        raise TypeMismatchError(
            f'shared_exec must be an Executor, got {type(shared).__name__}',
            role='shared_exec')
    if shared is not None and shared.freed:
        raise TypeMismatchError('shared_exec has been freed', role='shared_exec')

    logger.debug('binding %r on %r: %d args, %d aux, %d groups',
                 symbol, ctx, len(arg_arrays), len(aux_arrays), len(keys))
    try:
        handle = symbol.engine.executor_bind(
            symbol.handle, ctx.device_type_id, ctx.device_id,
            keys, dev_types, dev_ids,
            _handles(arg_arrays), _handles(grad_arrays),
            [int(r) for r in reqs], _handles(aux_arrays),
            shared.handle if shared is not None else None)
        grad_req = 'write' if options.grad_req is None else options.grad_req
        return Executor(handle, symbol, ctx, grad_req, options.group2ctx,
                        arg_arrays, grad_arrays, aux_arrays)
    except MXNetError as err:
        raise PlanConstructionError(f'bind failed: {err}') from err
