from lazyheap.heap import Heap, current_heap, force
from lazyheap.lists import Nil, Cons
from lazyheap.cycle import Discipline
from lazyheap.errors import EmptySequenceError

import dataclasses as dc
import logging

logger = logging.getLogger(__name__)


def drop_n(n, xs):
    if n < 0:
        raise ValueError(f'Cannot drop a negative number of elements: {n}')

    while n > 0:
        match force(xs):
            case Nil():
                # Dropping past the end just leaves us at the end
                return xs
            case Cons(_, tail):
                xs = tail
        n -= 1
    return xs

def head_of(xs):
    match force(xs):
        case Nil():
            raise EmptySequenceError.no_head(xs, address=xs.address)
        case Cons(head, _):
            return head


class Driver:
    """
    Consumes a list one element at a time, keeping whatever is left of it
    as the heap root 'remaining', so the heap sees exactly what the
    driver still holds.
    """

    def __init__(self, xs, heap=None, sample=True):
        self.heap = heap if heap is not None else current_heap()
        self.sample = sample
        self.steps = 0
        self.heap.root('remaining', xs)
        if self.sample:
            self.heap.sample()

    @property
    def remaining(self):
        return self.heap.roots['remaining']

    def drop(self, n):
        for _ in range(n):
            current = self.remaining
            rest = drop_n(1, current)
            if rest is current:
                logger.debug('Ran off the end after %d steps', self.steps)
                break

            self.heap.root('remaining', rest)
            self.steps += 1
            if self.sample:
                live = self.heap.sample()
                logger.debug('Step %d: %d live cells', self.steps, live)
        return self.remaining

    def head(self):
        return head_of(self.remaining)

    def head_value(self):
        return force(self.head())


@dc.dataclass(frozen=True)
class Report:
    discipline: Discipline
    head: object
    live: int
    peak: int
    created: int
    forced: int
    samples: tuple[int, ...] = ()

    def __str__(self):
        return (
            f'{self.discipline}: head={self.head} live={self.live} '
            f'peak={self.peak} created={self.created} forced={self.forced}'
        )


def run_scenario(discipline, lo, hi, drop, trace=False, sample=True):
    discipline = Discipline(discipline)
    with Heap(trace=trace) as heap:
        logger.debug('Running %s: cycle [%d..%d], drop %d',
                     discipline, lo, hi, drop)
        driver = Driver(discipline.cycle(lo, hi), heap, sample)
        driver.drop(drop)
        head = driver.head_value()
        live = heap.sample()
        return Report(
            discipline, head, live, heap.stats.peak_live,
            heap.stats.created, heap.stats.forced, tuple(heap.stats.samples)
        )
