"""
This contains "stress" tests, which perform
a large number of random operations on a btree.

These should compliment, static unit tests, in that they
exercise many more shapes of trees, and thus expose issues
in the rebalancing logic that unit-tests can't catch.
"""
import logging
import itertools
import math
import random

from typing import Iterable, List, Sequence

from .btree import Tree


STRESS_TEST_CASES = [
    [1, 2, 3, 4],
    [64, 5, 13, 82],
    [82, 13, 5, 2, 0],
    [10, 20, 30, 40, 50, 60, 70],
    [72, 79, 96, 38, 47],
    [432, 507, 311, 35, 246, 950, 956, 929, 769, 744, 994, 438],
    [159, 597, 520, 189, 822, 725, 504, 397, 218, 134, 516],
    [159, 597, 520, 189, 822, 725, 504, 397],
    [960, 267, 947, 400, 795, 327, 464, 884, 667, 870, 92],
    [793, 651, 165, 282, 177, 439, 593],
    [229, 653, 248, 298, 801, 947, 63, 619, 475, 422, 856, 57, 38],
    [103, 394, 484, 380, 834, 677, 604, 611, 952, 71, 568, 291, 433, 305],
    [114, 464, 55, 450, 729, 646, 95, 649, 59, 412, 546, 340, 667, 274, 477, 363, 333, 897, 772, 508, 182, 305, 428,
        180, 22],
    [15, 382, 653, 668, 139, 70, 828, 17, 891, 121, 175, 642, 491, 281, 920],
    [967, 163, 791, 938, 939, 196, 104, 465, 886, 355, 58, 251, 928, 758, 535, 737, 357, 125, 171, 838, 572, 745,
        999, 417, 393, 458, 292, 904, 158, 286, 900, 859, 668, 183],
    [726, 361, 583, 121, 908, 789, 842, 67, 871, 461, 522, 394, 225, 637, 792, 393, 656, 748, 39, 696],
    [54, 142, 440, 783, 619, 273, 95, 961, 692, 369, 447, 825, 555, 908, 483, 356, 40, 110, 519, 599],
    [413, 748, 452, 666, 956, 926, 94, 813, 245, 237, 264, 709, 706, 872, 535, 214, 561, 882, 646],
]


def run_add_del_stress_test(t: int, insert_keys: Sequence, del_keys: Sequence, verbose: bool = False):
    """
    insert all `insert_keys`, then delete `del_keys` one by one,
    validating the tree, and the keys it holds, after each delete

    :param t: minimum degree of tree
    :param insert_keys: may contain duplicates
    :param del_keys:
    :param verbose: print tree after each op
    :return:
    """
    tree = Tree(t)
    logging.info(f"running test case (t={t}): {list(insert_keys)} {list(del_keys)}")

    for key in insert_keys:
        tree.insert(key, f"value-{key}")
    tree.validate()

    remaining = set(insert_keys)
    for key in del_keys:
        entry = tree.delete(key)
        if key in remaining:
            assert entry is not None and entry.key == key, f"delete of key [{key}] returned [{entry}]"
            remaining.discard(key)
        else:
            assert entry is None, f"delete of missing key [{key}] returned [{entry}]"

        if verbose:
            tree.print_tree()
        # ensure tree is valid
        tree.validate()

        assert tree.search(key) is None, f"deleted key [{key}] still found"
        for live_key in remaining:
            assert tree.search(live_key) == f"value-{live_key}", f"key [{live_key}] lost after deleting [{key}]"

    if not remaining:
        assert tree.root.is_leaf and tree.root.size() == 0, f"expected empty root; found {tree.root}"


def del_permutations(keys: Sequence, num_perms: int = 1, step_size: int = 10) -> List[tuple]:
    """
    pick `num_perms` permutations of keys.

    there is a large number of perms ~O(n!)
    and they are generated in a predictable order;
    we'll skip based on fixed step
    """
    total_perms = math.factorial(len(keys))
    step_size = max(1, min(total_perms // num_perms, step_size))
    perm_iter = itertools.permutations(keys)

    del_perms = []
    while len(del_perms) < num_perms:
        for _ in range(step_size - 1):
            # skip n-1 permutations
            next(perm_iter)
        del_perms.append(next(perm_iter))
    return del_perms


def run_add_del_stress_suite(t_values: Iterable[int] = (2, 3, 4), num_perms: int = 1, seed: int = 1):
    """
    Perform a large number of add/del operations
    and validate btree correctness.

    For each test case, keys are deleted in some fixed permutations
    of insertion order, and in one shuffled order.
    """
    rng = random.Random(seed)
    for t in t_values:
        for test_case in STRESS_TEST_CASES:
            shuffled = test_case[:]
            rng.shuffle(shuffled)
            del_orders = del_permutations(test_case, num_perms) + [tuple(shuffled)]
            for del_keys in del_orders:
                try:
                    run_add_del_stress_test(t, test_case, del_keys)
                except Exception as e:
                    logging.error(f"stress test failed on (t={t}): {test_case} {del_keys} with {e}")
                    raise


def run_random_stress(t: int = 2, num_ops: int = 2000, key_range: int = 200, seed: int = 1):
    """
    perform a random mix of insert, put, and delete ops, and compare
    the tree against a dict after every op
    """
    rng = random.Random(seed)
    tree = Tree(t)
    model = {}
    for op_num in range(num_ops):
        key = rng.randrange(key_range)
        op = rng.choice(("insert", "put", "delete"))
        if op == "insert":
            inserted = tree.insert(key, op_num)
            assert inserted == (key not in model), f"insert of [{key}] returned {inserted}"
            model.setdefault(key, op_num)
        elif op == "put":
            old_value = tree.put(key, op_num)
            assert old_value == model.get(key), f"put of [{key}] returned {old_value}; expected {model.get(key)}"
            model[key] = op_num
        else:
            entry = tree.delete(key)
            if key in model:
                assert entry is not None and entry.value == model.pop(key)
            else:
                assert entry is None

        tree.validate()
        assert tree.search(key) == model.get(key)

    logging.info(f"random stress (t={t}) completed {num_ops} ops; {len(model)} keys remain")
    return tree, model
