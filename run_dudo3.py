"""
Train the two-dice Dudo strategy and print the average strategy of every
information set.
"""

import time

from dudo_cfr.solvers.dudo3 import Dudo3Trainer
from dudo_cfr.tree.builder import print_tree_stats


def main():
    print("=" * 70)
    print("Dudo (2 dice, 3-bid recall) CFR Trainer")
    print("=" * 70)

    print("\nBuilding node collection...")
    trainer = Dudo3Trainer()
    print_tree_stats(trainer.collection)

    iterations = 20000
    print(f"\nRunning {iterations} iterations...")
    start = time.time()
    trainer.train(iterations)
    elapsed = time.time() - start
    print(f"Done in {elapsed:.2f}s ({iterations/elapsed:.1f} iter/s)")

    print("\n")
    trainer.print_results()


if __name__ == "__main__":
    main()
