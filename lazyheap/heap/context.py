from lazyheap.errors import HeapError

import dataclasses as dc
import contextvars
import itertools
import logging
import weakref

logger = logging.getLogger(__name__)

_current_heap = contextvars.ContextVar('lazyheap_current_heap', default=None)


def current_heap():
    heap = _current_heap.get()
    if heap is None:
        raise HeapError.no_heap()
    return heap

def live_cell_count():
    return current_heap().live_cell_count()


@dc.dataclass
class HeapStats:
    created: int = 0
    forced: int = 0
    reclaimed: int = 0
    peak_live: int = 0
    samples: list[int] = dc.field(default_factory=list, repr=False)


@dc.dataclass(eq=False)
class Heap:
    """
    Owns the cell table and the root set for one run.

    Nothing here frees memory: "live" means reachable from the roots,
    which is what a real collector would have to keep around.  The
    table itself only holds cells weakly.
    """
    trace: bool = False
    sample_forces: bool = False
    stats: HeapStats = dc.field(init=False, default_factory=HeapStats)
    roots: dict = dc.field(init=False, default_factory=dict, repr=False)
    _cells: weakref.WeakValueDictionary = dc.field(
        init=False, default_factory=weakref.WeakValueDictionary, repr=False
    )
    _addresses: itertools.count = dc.field(
        init=False, default_factory=lambda: itertools.count(1), repr=False
    )
    _tokens: list = dc.field(init=False, default_factory=list, repr=False)

    def __enter__(self):
        self._tokens.append(_current_heap.set(self))
        logger.debug('Opened heap %#x', id(self))
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        _current_heap.reset(self._tokens.pop())

    def close(self):
        logger.debug(
            'Closing heap %#x: %d cells created, %d forced, peak live %d',
            id(self), self.stats.created, self.stats.forced,
            self.stats.peak_live
        )
        self.roots.clear()
        self._cells.clear()

    def register(self, cell):
        address = next(self._addresses)
        self._cells[address] = cell
        self.stats.created += 1
        return address

    def note_forced(self, cell):
        self.stats.forced += 1
        if self.sample_forces:
            self.sample()

    def root(self, name, cell):
        self.roots[name] = cell

    def unroot(self, name):
        del self.roots[name]

    def reachable(self):
        seen = {}
        stack = list(self.roots.values())
        while stack:
            cell = stack.pop()
            if cell.address in seen:
                continue
            seen[cell.address] = cell
            stack.extend(cell.cells())
        return seen

    def live_cell_count(self):
        return len(self.reachable())

    def tracked_cell_count(self):
        return len(self._cells)

    def sample(self):
        live = self.live_cell_count()
        self.stats.peak_live = max(self.stats.peak_live, live)
        if self.trace:
            self.stats.samples.append(live)
        return live

    def collect(self):
        live = self.reachable()
        dead = [address for address in list(self._cells.keys())
                if address not in live]
        for address in dead:
            # May have disappeared on its own in the meantime
            self._cells.pop(address, None)

        self.stats.reclaimed += len(dead)
        logger.debug('Collected %d cells, %d still live', len(dead), len(live))
        return len(dead)
