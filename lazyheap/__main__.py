from lazyheap.cycle import Discipline
from lazyheap.driver import run_scenario
from lazyheap.errors import LazyHeapError
import argparse
import logging
import sys


lazyheap = argparse.ArgumentParser(
    description='lazyheap: how much of cycle [lo..hi] is kept alive by '
                'call-by-need versus call-by-name',
    prog='lazyheap'
)

lazyheap.add_argument(
    '--mode', choices=['need', 'name', 'both'], default='both',
    help='evaluation discipline to run [default: both]'
)

lazyheap.add_argument(
    '--lo', help='first element of the range [default: 1]',
    type=int, default=1
)

lazyheap.add_argument(
    '-m', '--hi', dest='hi',
    help='last element of the range [default: 10]',
    type=int, default=10
)

lazyheap.add_argument(
    '-n', '--drop', dest='drop',
    help='number of elements to drop before reading the head [default: 100]',
    type=int, default=100
)

lazyheap.add_argument(
    '--trace', help='print the live cell count after every step',
    action='store_true'
)

lazyheap.add_argument(
    '--no-sample', dest='sample',
    help='only count live cells at the end (much faster for big drops)',
    action='store_false'
)

lazyheap.add_argument(
    '-v', '--verbose', help='enable debug logging',
    action='store_true'
)


def main(argv=None):
    args = lazyheap.parse_args(argv)
    if args.drop < 0:
        lazyheap.error('Number of elements to drop must not be negative')

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s: %(message)s'
    )

    if args.mode == 'both':
        disciplines = list(Discipline)
    else:
        disciplines = [Discipline(args.mode)]

    try:
        for discipline in disciplines:
            report = run_scenario(
                discipline, args.lo, args.hi, args.drop,
                trace=args.trace, sample=args.sample or args.trace
            )
            if args.trace:
                print(f'{discipline} live counts:', *report.samples)
            print(report)
    except LazyHeapError as err:
        print(err.get_info(), file=sys.stderr)
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
