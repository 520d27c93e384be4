from lazyheap.heap import Cell, Traceable, force
from lazyheap.lists import ListValue, append, make_generator
from lazyheap.errors import EmptySequenceError

import dataclasses as dc
import enum
import functools
from collections.abc import Callable


@dc.dataclass(frozen=True)
class SharedClosure(Traceable):
    # Every pending recursive call is suspended over this one object, so
    # origin (and the whole spine hanging off it) lives as long as the
    # cycle is being consumed.
    source: Cell
    origin: Cell

    def cells(self):
        yield self.source
        yield self.origin

@dc.dataclass(frozen=True)
class UnsharedClosure:
    producer: Callable[[], Cell]

    def __call__(self):
        return self.producer()


CycleClosure = SharedClosure | UnsharedClosure


def cycle_shared(source: Cell) -> Cell:
    """xs ++ cycle xs, with xs evaluated once and shared by every lap."""
    return Cell.fix(_start_shared, source)

def _start_shared(origin, source):
    return _unfold_shared(SharedClosure(source, origin))

def _unfold_shared(closure: SharedClosure) -> ListValue:
    return _lap(closure.source, closure, _unfold_shared)


def cycle_unshared(producer: Callable[[], Cell]) -> Cell:
    """f () ++ cycle f, rebuilding the list from scratch on every lap."""
    return Cell.suspend(_unfold_unshared, UnsharedClosure(producer))

def _unfold_unshared(closure: UnsharedClosure) -> ListValue:
    # Must call the producer here, once per lap.  Building the list once
    # outside this function turns it straight back into cycle_shared.
    return _lap(closure(), closure, _unfold_unshared)


def _lap(source: Cell, closure: CycleClosure, unfold) -> ListValue:
    # One pass over source, followed by a suspended call to unfold the
    # next lap over the same closure
    _check_nonempty(source)
    rest = Cell.suspend(unfold, closure)
    return force(append(source, rest))

def _check_nonempty(source):
    # Otherwise append(Nil, rest) would just unfold the next lap, forever
    if not force(source):
        raise EmptySequenceError.empty_cycle(source, address=source.address)


class Discipline(enum.Enum):
    NEED = 'need'
    NAME = 'name'

    def __str__(self):
        return self.value

    def cycle(self, lo, hi):
        if self is Discipline.NEED:
            return cycle_shared(make_generator(lo, hi))
        return cycle_unshared(functools.partial(make_generator, lo, hi))
