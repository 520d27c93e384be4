from .context import Heap, HeapStats, current_heap, live_cell_count
from .cells import (
    Cell, Traceable, Suspended, InProgress, Evaluated, Failed, State, force,
    trace
)
