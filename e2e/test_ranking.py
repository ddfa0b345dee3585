"""Ranker tests.

Covers the three-key comparator (priority desc, module asc, test_id asc),
string comparison of test ids, null handling, stability, and that ranking
never drops or merges incidents.
"""

import itertools

from ranking.ranker import rank, sort_key
from schemas.incident import ScoredIncident


# ── Helpers ──────────────────────────────────────────────────────────────────

def make_scored(test_id="T1", module="checkout", priority=1.0, **overrides) -> ScoredIncident:
    defaults = dict(
        test_id=test_id,
        module=module,
        environment="prod",
        failure_type="flaky",
        impacted_layers=("api",),
        base_minutes=10,
        final_minutes=10,
        priority_score=priority,
    )
    return ScoredIncident(**{**defaults, **overrides})


def _ids(incidents) -> list:
    return [i.test_id for i in incidents]


# ── Ordering keys ─────────────────────────────────────────────────────────────

class TestRankOrder:
    def test_priority_descending(self):
        ranked = rank([
            make_scored("A", priority=1.0),
            make_scored("B", priority=5.0),
            make_scored("C", priority=2.5),
        ])
        assert _ids(ranked) == ["B", "C", "A"]

    def test_module_breaks_priority_ties(self):
        ranked = rank([
            make_scored("A", module="search"),
            make_scored("B", module="checkout"),
            make_scored("C", module="payments"),
        ])
        assert [i.module for i in ranked] == ["checkout", "payments", "search"]

    def test_module_comparison_ignores_case_first(self):
        ranked = rank([
            make_scored("A", module="Search"),
            make_scored("B", module="checkout"),
        ])
        assert [i.module for i in ranked] == ["checkout", "Search"]

    def test_module_case_variants_are_still_totally_ordered(self):
        one = rank([make_scored("A", module="checkout"), make_scored("A", module="Checkout")])
        two = rank([make_scored("A", module="Checkout"), make_scored("A", module="checkout")])
        assert [i.module for i in one] == [i.module for i in two]

    def test_test_id_breaks_module_ties_as_strings(self):
        ranked = rank([make_scored("T2"), make_scored("T10")])
        assert _ids(ranked) == ["T10", "T2"]

    def test_null_test_id_compares_as_null_string(self):
        ranked = rank([
            make_scored("zeta"),
            make_scored(None),
            make_scored("alpha"),
        ])
        # "alpha" < "null" < "zeta"
        assert _ids(ranked) == ["alpha", None, "zeta"]

    def test_priority_dominates_module_and_test_id(self):
        ranked = rank([
            make_scored("A", module="aaa", priority=1.0),
            make_scored("Z", module="zzz", priority=2.0),
        ])
        assert _ids(ranked) == ["Z", "A"]

    def test_negative_priority_sorts_last(self):
        ranked = rank([make_scored("neg", priority=-5.0), make_scored("zero", priority=0.0)])
        assert _ids(ranked) == ["zero", "neg"]


# ── Totality and stability ────────────────────────────────────────────────────

class TestRankProperties:
    def test_full_ties_keep_input_order(self):
        first = make_scored("T1", environment="prod")
        second = make_scored("T1", environment="staging")
        assert [i.environment for i in rank([first, second])] == ["prod", "staging"]
        assert [i.environment for i in rank([second, first])] == ["staging", "prod"]

    def test_length_is_preserved(self):
        incidents = [make_scored("T1")] * 4 + [make_scored(None)] * 3
        assert len(rank(incidents)) == 7

    def test_input_is_not_modified(self):
        incidents = [make_scored("B", priority=1.0), make_scored("A", priority=2.0)]
        rank(incidents)
        assert _ids(incidents) == ["B", "A"]

    def test_empty_input(self):
        assert rank([]) == []

    def test_result_is_sorted_for_every_permutation(self):
        incidents = [
            make_scored("T2", module="checkout", priority=5.0),
            make_scored("T10", module="checkout", priority=5.0),
            make_scored(None, module="search", priority=5.0),
            make_scored("T1", module="payments", priority=0.5),
        ]
        expected = _ids(rank(incidents))
        for perm in itertools.permutations(incidents):
            ranked = rank(perm)
            assert _ids(ranked) == expected
            keys = [sort_key(i) for i in ranked]
            assert keys == sorted(keys)
