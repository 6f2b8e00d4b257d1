"""
Runs the stress suites with small parameters, so they
remain part of the regular test run.
"""
from .context import del_permutations, run_add_del_stress_test, run_add_del_stress_suite, run_random_stress


def test_del_permutations():
    perms = del_permutations([1, 2, 3], num_perms=2)
    assert perms == [(2, 1, 3), (3, 2, 1)]


def test_add_del_stress_test_with_duplicates_and_missing_keys():
    run_add_del_stress_test(2, [5, 3, 5, 9, 1], [9, 7, 5, 5, 1, 3])


def test_add_del_stress_suite():
    run_add_del_stress_suite(t_values=(2, 3))


def test_random_stress():
    for t in (2, 4):
        tree, model = run_random_stress(t, num_ops=400, key_range=60, seed=t)
        for key in range(60):
            assert tree.search(key) == model.get(key)
