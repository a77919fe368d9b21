"""Shared fixtures: an in-memory engine standing in for libmxnet."""

import itertools

import pytest

import mxbind
from mxbind import MXNetError, NDArray, Symbol


class FakeEngine:
    """Records every call; graphs are plain dicts keyed by handle."""

    def __init__(self):
        self._ids = itertools.count(0x1000)
        self.graphs = {}
        self.binds = []
        self.freed = []
        self.fail = set()

    def _maybe_fail(self, op):
        if op in self.fail:
            raise MXNetError(f'{op}: injected failure (ret=-1)')

    def add_graph(self, args, aux=(), outputs=None, name=None):
        handle = next(self._ids)
        if outputs is None:
            outputs = [f'{name or "_plus0"}_output']
        self.graphs[handle] = {
            'name': name, 'args': list(args), 'aux': list(aux),
            'outputs': list(outputs),
        }
        return handle

    def new_handle(self):
        return next(self._ids)

    # ── Engine surface ───────────────────────────────────────────────

    def symbol_get_name(self, handle):
        self._maybe_fail('get_name')
        name = self.graphs[handle]['name']
        return name, name is not None

    def symbol_list_arguments(self, handle):
        self._maybe_fail('list_arguments')
        return list(self.graphs[handle]['args'])

    def symbol_list_auxiliary_states(self, handle):
        self._maybe_fail('list_auxiliary_states')
        return list(self.graphs[handle]['aux'])

    def symbol_list_outputs(self, handle):
        self._maybe_fail('list_outputs')
        return list(self.graphs[handle]['outputs'])

    def symbol_copy(self, handle):
        self._maybe_fail('copy')
        g = self.graphs[handle]
        new = next(self._ids)
        self.graphs[new] = {k: (list(v) if isinstance(v, list) else v) for k, v in g.items()}
        return new

    def symbol_free(self, handle):
        self.freed.append(('symbol', handle))

    def executor_bind(self, handle, dev_type, dev_id, group_keys,
                      group_dev_types, group_dev_ids, arg_handles,
                      grad_handles, req_codes, aux_handles, shared_handle):
        self._maybe_fail('bind')
        exe = next(self._ids)
        self.binds.append({
            'symbol': handle, 'dev_type': dev_type, 'dev_id': dev_id,
            'group_keys': list(group_keys),
            'group_dev_types': list(group_dev_types),
            'group_dev_ids': list(group_dev_ids),
            'args': list(arg_handles), 'grads': list(grad_handles),
            'reqs': list(req_codes), 'aux': list(aux_handles),
            'shared': shared_handle, 'executor': exe,
        })
        return exe

    def executor_free(self, handle):
        self.freed.append(('executor', handle))

    def ndarray_free(self, handle):
        self.freed.append(('ndarray', handle))


@pytest.fixture
def engine():
    fake = FakeEngine()
    prev = mxbind.set_engine(fake)
    yield fake
    mxbind.set_engine(prev)


@pytest.fixture
def make_symbol(engine):
    def _make(args, aux=(), outputs=None, name=None):
        return Symbol(engine.add_graph(args, aux, outputs, name))
    return _make


@pytest.fixture
def make_array(engine):
    def _make():
        return NDArray(engine.new_handle())
    return _make
