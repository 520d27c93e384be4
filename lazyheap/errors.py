def _message(m):
    @classmethod
    def builder(cls, *args, **format_vars):
        return cls(m.format(**format_vars), *args)
    return builder

class LazyHeapError(Exception):
    def __init__(self, message, context=()):
        from lazyheap.heap.cells import Cell
        super().__init__(message)
        if isinstance(context, Cell):
            self.context = (context,)
        else:
            self.context = tuple(context)

    def get_info(self):
        message = f'{type(self).__name__}: {self}'
        # Innermost cell last, like a traceback
        for cell in self.context:
            message += f'\n    | {cell!r}'
        return message


class CyclicForceError(LazyHeapError):
    reentrant = _message(
        'Cell #{address} was forced while already under evaluation'
    )

class EmptySequenceError(LazyHeapError):
    no_head = _message('Cannot take the head of an empty list (cell #{address})')
    empty_cycle = _message('Cannot cycle an empty list (cell #{address})')

class HeapError(LazyHeapError):
    no_heap = _message(
        'No active heap, cells must be created and forced inside `with Heap():`'
    )
