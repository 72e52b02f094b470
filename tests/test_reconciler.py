"""Tests for sitemigrate.services.reconciler.reconcile."""

from sitemigrate.services.reconciler import reconcile

A = "https://example.com/a"
B = "https://example.com/b"
C = "https://example.com/c"
D = "https://example.com/d"


class TestReconcile:
    def test_removes_done_targets(self):
        assert reconcile([A, B], [A]) == [B]

    def test_no_done_returns_deduplicated_targets(self):
        assert reconcile([A, B, A, C, B], []) == [A, B, C]

    def test_preserves_target_file_order(self):
        # Order of the done list must not influence the worklist order
        targets = [D, C, B, A]
        assert reconcile(targets, [C]) == [D, B, A]

    def test_duplicates_keep_first_position(self):
        assert reconcile([B, A, B], []) == [B, A]

    def test_done_urls_not_in_targets_are_ignored(self):
        assert reconcile([A], [B, C]) == [A]

    def test_duplicate_done_records_tolerated(self):
        assert reconcile([A, B, C], [A, A, C, C]) == [B]

    def test_everything_done(self):
        assert reconcile([A, B], [B, A]) == []

    def test_empty_targets(self):
        assert reconcile([], [A]) == []

    def test_worklist_is_subset_of_targets_and_disjoint_from_done(self):
        targets = [A, B, C, D, B]
        done = [B, "https://other.org/x"]
        worklist = reconcile(targets, done)
        assert set(worklist) <= set(targets)
        assert not set(worklist) & set(done)

    def test_idempotent(self):
        targets = [A, B, C, D, A]
        done = [C, A]
        once = reconcile(targets, done)
        assert reconcile(once, done) == once

    def test_accepts_generators(self):
        assert reconcile((u for u in [A, B]), (u for u in [B])) == [A]
