from lazyheap.heap import Heap, Cell, force, live_cell_count
from lazyheap.lists import make_generator, append
from lazyheap.cycle import Discipline, cycle_shared, cycle_unshared
from lazyheap.driver import Driver, drop_n, run_scenario

import gc
import pytest


def live_counts_per_lap(discipline, m, laps):
    counts = []
    with Heap() as heap:
        driver = Driver(Discipline(discipline).cycle(1, m), heap)
        for _ in range(laps):
            driver.drop(m)
            counts.append(live_cell_count())
    return counts


def test_empty_heap():
    with Heap() as heap:
        assert heap.live_cell_count() == 0
        assert heap.tracked_cell_count() == 0

def test_live_cells_follow_roots():
    with Heap() as heap:
        xs = make_generator(1, 3)
        Cell.ready(None)
        assert heap.live_cell_count() == 0

        heap.root('xs', xs)
        assert heap.live_cell_count() == 1

        force(xs)
        # xs, its head and its (still suspended) tail
        assert heap.live_cell_count() == 3

        heap.unroot('xs')
        assert heap.live_cell_count() == 0

def test_shared_roots_are_counted_once():
    with Heap() as heap:
        xs = make_generator(1, 2)
        both = append(xs, xs)
        heap.root('a', both)
        heap.root('b', xs)
        assert heap.live_cell_count() == 2
        force(both)
        # both -> (head, append(tail, xs)); xs -> (head, tail)
        assert set(heap.reachable()) == {
            c.address for c in [both, xs, force(xs).head, force(xs).tail,
                                force(both).tail]
        }

@pytest.mark.parametrize('m', [3, 10])
def test_shared_retention_grows_linearly(m):
    counts = live_counts_per_lap('need', m, 6)
    for k, count in enumerate(counts, 1):
        assert count >= k * m
    for before, after in zip(counts, counts[1:]):
        assert after - before >= m

@pytest.mark.parametrize('m', [3, 10])
def test_unshared_retention_is_bounded(m):
    counts = live_counts_per_lap('name', m, 6)
    assert max(counts) <= 5
    assert len(set(counts)) == 1

def test_unshared_scenario_bounded_at_all_times():
    with Heap(trace=True, sample_forces=True) as heap:
        driver = Driver(cycle_unshared(lambda: make_generator(1, 10)), heap)
        driver.drop(100)
        assert driver.head_value() == 1
        # Sampled after every step and every force
        assert len(heap.stats.samples) > 200
        assert max(heap.stats.samples) <= 20
        assert heap.stats.peak_live <= 20

def test_shared_scenario_retains_everything():
    with Heap(trace=True) as heap:
        driver = Driver(cycle_shared(make_generator(1, 10)), heap)
        driver.drop(100)
        assert driver.head_value() == 1
        assert live_cell_count() >= 100
        # Never goes down while we consume
        samples = heap.stats.samples
        assert all(a <= b for a, b in zip(samples, samples[1:]))

def test_shared_origin_stays_reachable():
    with Heap() as heap:
        xs = cycle_shared(make_generator(1, 4))
        driver = Driver(xs, heap)
        driver.drop(21)
        assert xs.address in heap.reachable()

def test_unshared_origin_is_released():
    with Heap() as heap:
        xs = cycle_unshared(lambda: make_generator(1, 4))
        driver = Driver(xs, heap)
        driver.drop(21)
        assert xs.address not in heap.reachable()

def test_scenario_reports():
    need = run_scenario('need', 1, 10, 100)
    name = run_scenario('name', 1, 10, 100)
    assert need.head == name.head == 1
    assert need.live >= 100
    assert name.peak <= 20
    assert need.peak > name.peak

def test_collect():
    with Heap() as heap:
        xs = cycle_unshared(lambda: make_generator(1, 10))
        driver = Driver(xs, heap)
        driver.drop(50)
        # The test itself still holds the first lap through xs
        assert heap.tracked_cell_count() > heap.live_cell_count()

        reclaimed = heap.collect()
        assert reclaimed > 0
        assert heap.stats.reclaimed == reclaimed
        assert heap.tracked_cell_count() == heap.live_cell_count()
        assert heap.collect() == 0

def test_python_agrees_with_the_model():
    # With nothing but the roots holding on to cells, the cells Python
    # keeps alive are the ones the heap considers live
    for discipline in Discipline:
        with Heap() as heap:
            driver = Driver(discipline.cycle(1, 10), heap)
            driver.drop(100)
            gc.collect()
            assert heap.tracked_cell_count() == heap.live_cell_count()

def test_teardown_drops_everything():
    with Heap() as heap:
        heap.root('xs', drop_n(3, make_generator(1, 10)))
        assert heap.live_cell_count() > 0
    assert heap.roots == {}
    assert heap.tracked_cell_count() == 0

def test_nested_heaps():
    with Heap() as outer:
        with Heap() as inner:
            Cell.ready(1)
        Cell.ready(2)
        assert inner.stats.created == 1
        assert outer.stats.created == 1
