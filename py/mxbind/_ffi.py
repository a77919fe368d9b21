"""
ctypes bindings to libmxnet.so -- only the symbol/executor surface of
c_api.h that binding needs.

The shared library is loaded lazily on first use so that the package can
be imported (and an alternative engine installed with ``set_engine``) on
machines without MXNet.
"""

import ctypes
import ctypes.util
import logging
import os
import threading

import numpy as np

from .base import MXNetError, check_call

logger = logging.getLogger(__name__)

# --- Opaque pointer types ---
_ptr = ctypes.c_void_p
_uint = ctypes.c_uint
_uintp = ctypes.POINTER(ctypes.c_uint)
_ip = ctypes.POINTER(ctypes.c_int)
_strp = ctypes.POINTER(ctypes.c_char_p)


def _find_library():
    """Resolve the libmxnet path from MXNET_LIBRARY_PATH or the loader."""
    path = os.environ.get('MXNET_LIBRARY_PATH')
    if path:
        return path
    path = ctypes.util.find_library('mxnet')
    if path is None:
        raise MXNetError(
            'libmxnet not found; set MXNET_LIBRARY_PATH to the shared library')
    return path


def _declare(lib):
    # --- Errors ---
    lib.MXGetLastError.restype = ctypes.c_char_p
    lib.MXGetLastError.argtypes = []

    # --- Symbol ---
    lib.MXSymbolGetName.restype = ctypes.c_int
    lib.MXSymbolGetName.argtypes = [_ptr, _strp, _ip]

    for _n in ['MXSymbolListArguments', 'MXSymbolListAuxiliaryStates',
               'MXSymbolListOutputs']:
        fn = getattr(lib, _n)
        fn.restype = ctypes.c_int
        fn.argtypes = [_ptr, _uintp, ctypes.POINTER(_strp)]

    lib.MXSymbolCopy.restype = ctypes.c_int
    lib.MXSymbolCopy.argtypes = [_ptr, ctypes.POINTER(_ptr)]

    lib.MXSymbolFree.restype = ctypes.c_int
    lib.MXSymbolFree.argtypes = [_ptr]

    # --- Executor ---
    lib.MXExecutorBindEX.restype = ctypes.c_int
    lib.MXExecutorBindEX.argtypes = [
        _ptr,                   # symbol
        ctypes.c_int,           # dev_type
        ctypes.c_int,           # dev_id
        _uint,                  # num_map_keys
        _strp,                  # map_keys
        _ip,                    # map_dev_types
        _ip,                    # map_dev_ids
        _uint,                  # len
        ctypes.POINTER(_ptr),   # in_args
        ctypes.POINTER(_ptr),   # arg_grad_store
        _uintp,                 # grad_req_type
        _uint,                  # aux_states_len
        ctypes.POINTER(_ptr),   # aux_states
        _ptr,                   # shared_exec
        ctypes.POINTER(_ptr),   # out
    ]

    lib.MXExecutorFree.restype = ctypes.c_int
    lib.MXExecutorFree.argtypes = [_ptr]

    # --- NDArray ---
    lib.MXNDArrayFree.restype = ctypes.c_int
    lib.MXNDArrayFree.argtypes = [_ptr]


def _handle_array(handles):
    """Convert a sequence of handles (None for absent) to a void* array."""
    return (_ptr * len(handles))(*handles)


def _int_table(vals, dtype):
    """Contiguous numpy table for the engine, plus a pointer into it."""
    arr = np.ascontiguousarray(vals, dtype=dtype)
    ctype = ctypes.c_uint if dtype == np.uint32 else ctypes.c_int
    return arr, arr.ctypes.data_as(ctypes.POINTER(ctype))


def _decode(raw):
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError as err:
        raise MXNetError(f'engine returned a name that is not UTF-8: {raw!r}') from err


def _read_names(size, names):
    return [_decode(names[i]) for i in range(size.value)]


class NativeEngine:
    """Engine backed by the libmxnet C API."""

    def __init__(self, lib=None):
        if lib is None:
            path = _find_library()
            logger.debug('loading libmxnet from %s', path)
            lib = ctypes.CDLL(path)
        _declare(lib)
        self._lib = lib

    def _check(self, ret):
        check_call(ret, self._last_error)

    def _last_error(self):
        msg = self._lib.MXGetLastError()
        return msg.decode('utf-8', errors='replace') if msg else ''

    # ── Symbol ──────────────────────────────────────────────────────

    def symbol_get_name(self, handle):
        """Return (name, found)."""
        name = ctypes.c_char_p()
        success = ctypes.c_int(0)
        self._check(self._lib.MXSymbolGetName(
            handle, ctypes.byref(name), ctypes.byref(success)))
        if not success.value:
            return None, False
        return _decode(name.value), True

    def _list(self, fn, handle):
        size = _uint(0)
        names = _strp()
        self._check(fn(handle, ctypes.byref(size), ctypes.byref(names)))
        return _read_names(size, names)

    def symbol_list_arguments(self, handle):
        return self._list(self._lib.MXSymbolListArguments, handle)

    def symbol_list_auxiliary_states(self, handle):
        return self._list(self._lib.MXSymbolListAuxiliaryStates, handle)

    def symbol_list_outputs(self, handle):
        return self._list(self._lib.MXSymbolListOutputs, handle)

    def symbol_copy(self, handle):
        out = _ptr()
        self._check(self._lib.MXSymbolCopy(handle, ctypes.byref(out)))
        return out.value

    def symbol_free(self, handle):
        self._check(self._lib.MXSymbolFree(handle))

    # ── Executor ────────────────────────────────────────────────────

    def executor_bind(self, handle, dev_type, dev_id, group_keys,
                      group_dev_types, group_dev_ids, arg_handles,
                      grad_handles, req_codes, aux_handles, shared_handle):
        """Call MXExecutorBindEX and return the new executor handle.

        Every table lives only for the duration of this call.
        """
        n_keys = len(group_keys)
        if n_keys:
            keys = (ctypes.c_char_p * n_keys)(
                *[k.encode('utf-8') for k in group_keys])
            _types, types_p = _int_table(group_dev_types, np.int32)
            _ids, ids_p = _int_table(group_dev_ids, np.int32)
        else:
            keys, types_p, ids_p = None, None, None

        args = _handle_array(arg_handles)
        grads = _handle_array(grad_handles)
        aux = _handle_array(aux_handles)
        _reqs, reqs_p = _int_table(req_codes, np.uint32)

        out = _ptr()
        self._check(self._lib.MXExecutorBindEX(
            handle, dev_type, dev_id,
            n_keys, keys, types_p, ids_p,
            len(arg_handles), args, grads, reqs_p,
            len(aux_handles), aux,
            shared_handle, ctypes.byref(out)))
        return out.value

    def executor_free(self, handle):
        self._check(self._lib.MXExecutorFree(handle))

    # ── NDArray ─────────────────────────────────────────────────────

    def ndarray_free(self, handle):
        self._check(self._lib.MXNDArrayFree(handle))


# Process-default engine, created on first use
_engine = None
_engine_lock = threading.Lock()


def get_engine():
    """Return the default engine, loading libmxnet if needed."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = NativeEngine()
    return _engine


def set_engine(engine):
    """Install ``engine`` as the default; returns the previous one."""
    global _engine
    with _engine_lock:
        prev, _engine = _engine, engine
    return prev
