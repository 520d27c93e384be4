from .context import current_heap
from lazyheap.errors import CyclicForceError

import dataclasses as dc
from abc import ABC, abstractmethod
from collections.abc import Callable


class Traceable(ABC):
    """Anything other than a cell that can hold references to cells."""

    @abstractmethod
    def cells(self):
        pass


def trace(obj):
    """Yield the cells directly referenced by obj."""
    match obj:
        case Cell():
            yield obj
        case Traceable():
            yield from obj.cells()
        case tuple() | list():
            for item in obj:
                yield from trace(item)
    # Anything else (ints, ranges, plain functions) is opaque


@dc.dataclass(frozen=True)
class Suspended:
    producer: Callable
    args: tuple = ()

    def __str__(self):
        name = getattr(self.producer, '__name__', repr(self.producer))
        return f'suspended {name}({", ".join(_short(arg) for arg in self.args)})'

@dc.dataclass(frozen=True)
class InProgress:
    # Kept so that whatever the evaluation still needs stays visible to
    # the heap while the producer is running
    pending: Suspended

    def __str__(self):
        return f'in progress ({self.pending})'

@dc.dataclass(frozen=True)
class Evaluated:
    value: object

    def __str__(self):
        return f'= {self.value!r}'

@dc.dataclass(frozen=True)
class Failed:
    # Final, like Evaluated: forcing again re-raises, never re-runs
    error: BaseException

    def __str__(self):
        return f'failed with {self.error!r}'


State = Suspended | InProgress | Evaluated | Failed


class Cell:
    __slots__ = 'address', '_state', '__weakref__'

    def __init__(self, state: State):
        self._state = state
        self.address = current_heap().register(self)

    @classmethod
    def suspend(cls, producer, *args):
        return cls(Suspended(producer, args))

    @classmethod
    def fix(cls, producer, *args):
        # Called as producer(cell, *args).  The self reference goes away
        # along with the rest of the arguments once the cell is evaluated.
        cell = cls.suspend(producer, *args)
        cell._state = Suspended(producer, (cell, *args))
        return cell

    @classmethod
    def ready(cls, value):
        return cls(Evaluated(value))

    @property
    def state(self) -> State:
        return self._state

    @property
    def evaluated(self):
        return isinstance(self._state, Evaluated)

    def cells(self):
        match self._state:
            case Suspended(_, args) | InProgress(Suspended(_, args)):
                yield from trace(args)
            case Evaluated(value):
                yield from trace(value)

    def force(self):
        return force(self)

    def __repr__(self):
        return f'<Cell #{self.address} {self._state}>'


def force(cell):
    match cell.state:
        case Evaluated(value):
            return value
        case Failed(error):
            raise error
        case InProgress():
            raise CyclicForceError.reentrant(cell, address=cell.address)
        case Suspended(producer, args) as pending:
            heap = current_heap()
            # A concurrent heap would compare-and-swap here and park the
            # second forcer instead of raising
            cell._state = InProgress(pending)
            try:
                value = producer(*args)
            except BaseException as err:
                cell._state = Failed(err)
                raise
            cell._state = Evaluated(value)
            heap.note_forced(cell)
            return value


def _short(arg):
    if isinstance(arg, Cell):
        return f'#{arg.address}'
    return repr(arg)
