from lazyheap.heap import Cell, Traceable, force

import dataclasses as dc
import itertools


class Cons(Traceable):
    __slots__ = 'head', 'tail'
    __match_args__ = 'head', 'tail'

    def __init__(self, head: Cell, tail: Cell):
        self.head = head
        self.tail = tail

    def cells(self):
        yield self.head
        yield self.tail

    def __repr__(self):
        return f'Cons(#{self.head.address}, #{self.tail.address})'

    def __bool__(self):
        return True


class Nil(Traceable):
    __slots__ = ()

    def cells(self):
        return ()

    def __repr__(self):
        return 'Nil'

    def __bool__(self):
        return False

    def __eq__(self, other):
        return isinstance(other, Nil)

    def __hash__(self):
        return hash(Nil)

NIL = Nil()

ListValue = Cons | Nil


@dc.dataclass(frozen=True)
class Range:
    """Bounded integer sequence, lo and hi inclusive.  Holds no cells."""
    lo: int
    hi: int

    def __len__(self):
        return max(0, self.hi - self.lo + 1)

    def element(self, i):
        if not 0 <= i < len(self):
            raise IndexError(f'{self} has no element {i}')
        return self.lo + i

    def rest(self):
        return Range(self.lo + 1, self.hi)

    def unfold(self):
        return Cell.suspend(_unfold_range, self)


def make_generator(lo, hi):
    return Range(lo, hi).unfold()

def _unfold_range(rng: Range) -> ListValue:
    if not rng:
        return NIL
    return Cons(Cell.suspend(rng.element, 0), rng.rest().unfold())


def append(xs, ys):
    return Cell.suspend(_append, xs, ys)

def _append(xs: Cell, ys: Cell) -> ListValue:
    match force(xs):
        case Nil():
            # ys itself, not a copy
            return force(ys)
        case Cons(head, tail):
            return Cons(head, append(tail, ys))


def from_iterable(iterable):
    return Cell.suspend(_next_node, iter(iterable))

def _next_node(iterator):
    try:
        item = next(iterator)
    except StopIteration:
        return NIL
    return Cons(Cell.ready(item), Cell.suspend(_next_node, iterator))


# Plain function, not a method: a bound generator keeps a reference to
# its instance even after the local is reassigned, which would pin the
# start of the list for as long as we iterate.
def values(xs):
    while node := force(xs):
        yield force(node.head)
        xs = node.tail

def take(n, xs):
    return list(itertools.islice(values(xs), n))
