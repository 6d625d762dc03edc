#!/usr/bin/env python3
"""
Utility script to run the NEAT examples easily.

Usage:
    python scripts/run_example.py xor
    python scripts/run_example.py xor --save my_run
    python scripts/run_example.py xor --continue my_run
    python scripts/run_example.py --list
"""

import sys
import argparse
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from neatarena import Config, list_collections, load_collection
from examples.trial_XOR import Trial_XOR


EXAMPLES = {
    'xor': {
        'trial': Trial_XOR,
        'config': 'examples/configs/config_xor.ini',
        'description': 'XOR logic problem'
    },
}


def main():
    parser = argparse.ArgumentParser(description='Run NEAT examples')
    parser.add_argument('example', nargs='?', choices=EXAMPLES.keys(),
                        help='Example to run')
    parser.add_argument('--num-jobs', type=int, default=1,
                        help='Number of parallel jobs for fitness evaluation')
    parser.add_argument('--save', metavar='NAME',
                        help='Store the final population as a collection')
    parser.add_argument('--continue', dest='resume', metavar='NAME',
                        help='Continue training a stored collection')
    parser.add_argument('--list', action='store_true',
                        help='List the stored collections and exit')
    parser.add_argument('--verbose', action='store_true',
                        help='Show debug logging')

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(name)s %(levelname)s: %(message)s')

    if args.list:
        for name in list_collections():
            print(name)
        return

    if args.example is None:
        parser.error('an example is required unless --list is given')

    example = EXAMPLES[args.example]
    print(f"Running {example['description']}...")

    if args.resume:
        population = load_collection(args.resume)
        config     = population.config
        print(f"Continuing collection '{args.resume}' from generation {population.generation}")
    else:
        population = None
        config     = Config(example['config'])

    trial = example['trial'](config, population=population, collection_name=args.save or args.resume)
    trial.run(num_jobs=args.num_jobs)
    print(f"\nBest fitness: {trial.population.get_fittest_genome().fitness:.4f}")


if __name__ == '__main__':
    main()
