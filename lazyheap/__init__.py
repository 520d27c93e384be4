from .heap import *
from .lists import *
from .cycle import *
from .driver import *
from .errors import (
    LazyHeapError, CyclicForceError, EmptySequenceError, HeapError
)
