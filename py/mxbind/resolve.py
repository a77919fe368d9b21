"""
Resolution of user-facing bind inputs into positional tables.

Arrays and gradient requirements may be given positionally (one entry per
declared name, in declaration order) or keyed by name. Both forms are
resolved against the symbol's canonical ordering so the engine always
receives tables aligned with ``Symbol.list_arguments()`` or
``Symbol.list_auxiliary_states()``.
"""

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from .context import Context
from .errors import (
    ArityMismatchError,
    InvalidContextError,
    InvalidRequirementError,
    InvalidRequirementTypeError,
    MissingArgumentError,
    TypeMismatchError,
    UnsupportedInputShapeError,
)
from .ndarray import is_ndarray

logger = logging.getLogger(__name__)


# --- Buffer collections ---

@dataclass(frozen=True)
class Positional:
    """Arrays in declaration order."""
    items: tuple


@dataclass(frozen=True)
class Named:
    """Arrays keyed by argument name."""
    items: Mapping


def classify(role, arrays):
    """Tag ``arrays`` as Positional or Named.

    Lists and tuples are positional, mappings are named. Anything else
    (including str and bytes) raises UnsupportedInputShapeError.
    """
    if isinstance(arrays, (Positional, Named)):
        return arrays
    if isinstance(arrays, (list, tuple)):
        return Positional(tuple(arrays))
    if isinstance(arrays, Mapping):
        return Named(arrays)
    raise UnsupportedInputShapeError(
        f'{role} must be a list of NDArrays or a dict of name to NDArray, '
        f'got {type(arrays).__name__}', role=role)


def _check_array(role, name, value):
    if not is_ndarray(value):
        raise TypeMismatchError(
            f'{role}[{name!r}] must be an NDArray, got {type(value).__name__}',
            role=role, name=name)
    return value


def _log_extra_keys(role, mapping, names):
    declared = set(names)
    extra = [k for k in mapping if k not in declared]
    if extra:
        logger.debug('ignoring %s entries not declared by the symbol: %s', role, extra)


def resolve_arrays(role, arrays, names, allow_missing=False):
    """Resolve ``arrays`` into a list aligned with ``names``.

    Args:
        role: Input being resolved ("args", "args_grad", "aux_states"),
            used in error messages.
        arrays: list/tuple of NDArray in ``names`` order, or a mapping of
            name to NDArray.
        names: Reference ordering.
        allow_missing: When True, names absent from a mapping resolve to
            None instead of raising MissingArgumentError.

    Returns:
        A new list with one NDArray (or None) per name.
    """
    arrays = classify(role, arrays)

    if isinstance(arrays, Positional):
        if len(arrays.items) != len(names):
            raise ArityMismatchError(
                f'length of {role} ({len(arrays.items)}) does not match '
                f'the number of arguments ({len(names)})', role=role)
        return [_check_array(role, name, value)
                for name, value in zip(names, arrays.items)]

    table = []
    for name in names:
        if name in arrays.items:
            table.append(_check_array(role, name, arrays.items[name]))
        elif allow_missing:
            table.append(None)
        else:
            raise MissingArgumentError(
                f'key {name!r} is missing in {role}', role=role, name=name)
    _log_extra_keys(role, arrays.items, names)
    return table


# --- Gradient requirements ---

class GradReq(enum.IntEnum):
    """How the executor treats an argument's gradient buffer."""

    NULL = 0    # no gradient
    WRITE = 1   # overwrite
    ADD = 3     # accumulate

    @classmethod
    def parse(cls, label, *, name=None):
        """Map a label ("null", "write", "add", bytes or GradReq) to GradReq."""
        if isinstance(label, GradReq):
            return label
        if isinstance(label, bytes):
            label = label.decode('utf-8', errors='replace')
        labels = {m.name.lower(): m for m in cls}
        if isinstance(label, str) and label in labels:
            return labels[label]
        raise InvalidRequirementError(
            f'grad_req must be one of {list(labels)}, got {label!r}',
            role='grad_req', name=name)


def _is_label(policy):
    return isinstance(policy, (str, bytes, GradReq))


def resolve_grad_req(policy, names):
    """Resolve a gradient requirement policy into one GradReq per name.

    ``None`` means write for every argument. A mapping leaves unnamed
    arguments at null, not write.
    """
    if policy is None:
        return [GradReq.WRITE] * len(names)

    if _is_label(policy):
        req = GradReq.parse(policy)
        return [req] * len(names)

    if isinstance(policy, (list, tuple)):
        if len(policy) != len(names):
            raise ArityMismatchError(
                f'length of grad_req ({len(policy)}) does not match '
                f'the number of arguments ({len(names)})', role='grad_req')
        return [GradReq.parse(label, name=name) for name, label in zip(names, policy)]

    if isinstance(policy, Mapping):
        reqs = [GradReq.parse(policy[name], name=name) if name in policy else GradReq.NULL
                for name in names]
        _log_extra_keys('grad_req', policy, names)
        return reqs

    raise InvalidRequirementTypeError(
        f'invalid type of grad_req ({type(policy).__name__} for str, list, or dict)',
        role='grad_req')


# --- Context groups ---

def _group_key(key):
    if isinstance(key, bytes):
        return key.decode('utf-8')
    return str(key)


def resolve_group2ctx(group2ctx):
    """Flatten a group-to-context mapping into parallel lists.

    Returns:
        (keys, dev_types, dev_ids); index i of each list describes the
        same group. All three are empty when ``group2ctx`` is None.
    """
    keys, dev_types, dev_ids = [], [], []
    if group2ctx is None:
        return keys, dev_types, dev_ids
    if not isinstance(group2ctx, Mapping):
        raise InvalidContextError(
            f'group2ctx must be a dict of group name to Context, '
            f'got {type(group2ctx).__name__}', role='group2ctx')

    for key, ctx in group2ctx.items():
        key = _group_key(key)
        if key in keys:
            raise InvalidContextError(
                f'group2ctx has more than one entry for group {key!r}',
                role='group2ctx', name=key)
        if not isinstance(ctx, Context):
            raise InvalidContextError(
                f'group2ctx[{key!r}] must be a Context, got {type(ctx).__name__}',
                role='group2ctx', name=key)
        keys.append(key)
        dev_types.append(ctx.device_type_id)
        dev_ids.append(ctx.device_id)
    return keys, dev_types, dev_ids
