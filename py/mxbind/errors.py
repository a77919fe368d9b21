"""
mxbind exception hierarchy.

Every error raised while introspecting, copying or binding a symbol
derives from MXBindError and also from the builtin an ordinary caller
would expect (ValueError, TypeError or RuntimeError).
"""

from typing import Optional


class MXBindError(Exception):
    """Base exception for all mxbind errors.

    Attributes:
        message: Human-readable error description.
        role: Which bind input was at fault ("args", "args_grad",
            "aux_states", "grad_req", "group2ctx", ...), if any.
        name: The offending argument or group name, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        role: Optional[str] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.role = role
        self.name = name

    def __repr__(self) -> str:
        extra = ''
        if self.role is not None:
            extra += f', role={self.role!r}'
        if self.name is not None:
            extra += f', name={self.name!r}'
        return f'{self.__class__.__name__}({self.message!r}{extra})'


# Engine failures

class GraphIntrospectionError(MXBindError, RuntimeError):
    """A symbol query failed or the symbol handle is no longer valid."""


class GraphCopyError(MXBindError, RuntimeError):
    """The engine could not copy a symbol."""


class PlanConstructionError(MXBindError, RuntimeError):
    """The engine rejected the bind request."""


# Argument resolution

class ArityMismatchError(MXBindError, ValueError):
    """A positional input does not have one entry per declared name."""


class MissingArgumentError(MXBindError, ValueError):
    """A required name is absent from a name-keyed input."""


class TypeMismatchError(MXBindError, TypeError):
    """An entry is not a buffer reference (or handle) of the expected kind."""


class UnsupportedInputShapeError(MXBindError, TypeError):
    """An input is neither an ordered sequence nor a name-keyed mapping."""


# Gradient requirements

class InvalidRequirementError(MXBindError, ValueError):
    """A gradient requirement label is not one of null, write, add."""


class InvalidRequirementTypeError(MXBindError, TypeError):
    """A gradient requirement policy has an unsupported shape."""


# Placement

class InvalidContextError(MXBindError, TypeError):
    """A device context (or context-group map) is malformed."""
