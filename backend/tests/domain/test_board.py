"""Tests for the block store: hydration, mutations, and change notification."""

import random
from collections import Counter

import pytest

from app.core.exceptions import UnknownCategoryError
from app.domain.board import Block, BoardStore
from app.domain.categories import DECONSTRUCT, SYNTHESIS

pytestmark = pytest.mark.unit


def ids(store: BoardStore, category: str) -> list[str]:
    return [b.id for b in store.blocks(category)]


def assert_invariants(store: BoardStore) -> None:
    """Every block sits under its own category and every id appears once."""
    seen = Counter()
    for key, blocks in store.lists().items():
        for block in blocks:
            assert block.category == key
            seen[block.id] += 1
    assert all(count == 1 for count in seen.values())
    assert len(store.snapshot()) == sum(seen.values())


class TestHydrate:
    """Test board hydration from an inbound seed."""

    def test_seed_maps_logical_names(self, board):
        """Logical seed names land in their categories with deterministic ids."""
        assert ids(board, "problem") == ["problem-0", "problem-1"]
        assert ids(board, "alternatives") == ["alternatives-0"]
        assert ids(board, "segments") == ["segments-0"]
        assert ids(board, "early-adopters") == ["early-adopters-0"]
        assert board.blocks("alternatives")[0].text == "Spreadsheets"

    def test_seed_limit_applied(self, board):
        """Job to be Done keeps only the first seeded item."""
        assert ids(board, "job-to-be-done") == ["job-to-be-done-0"]
        assert board.blocks("job-to-be-done")[0].text == "Get paid without losing the sale"

    def test_seed_limit_five_per_category(self):
        store = BoardStore.hydrate(DECONSTRUCT, {"problem": [f"p{i}" for i in range(8)]})
        assert len(store.blocks("problem")) == 5

    def test_listener_notified_once_after_hydration(self, board, recorder):
        assert len(recorder.calls) == 1
        assert len(recorder.last) == 6

    @pytest.mark.parametrize("seed", [None, {}])
    def test_missing_seed_gives_empty_board(self, seed, recorder):
        store = BoardStore.hydrate(DECONSTRUCT, seed, on_change=recorder)
        assert len(store) == 0
        assert recorder.calls == [[]]

    def test_unknown_seed_keys_skipped(self):
        store = BoardStore.hydrate(DECONSTRUCT, {"competitors": ["Stripe"], "problem": ["Fraud"]})
        assert len(store) == 1
        assert ids(store, "problem") == ["problem-0"]

    def test_non_string_items_skipped(self):
        store = BoardStore.hydrate(DECONSTRUCT, {"problem": ["Fraud", 42, None, ""]})
        assert [b.text for b in store.blocks("problem")] == ["Fraud", ""]

    def test_string_instead_of_list_skipped(self):
        store = BoardStore.hydrate(DECONSTRUCT, {"problem": "Fraud"})
        assert len(store) == 0

    def test_seed_blank_schema_gets_starter_blocks(self):
        """Synthesis canvas starts with one empty block per category."""
        store = BoardStore.hydrate(SYNTHESIS, None)
        assert [r.id for r in store.snapshot()] == [
            "push-1",
            "pull-1",
            "inertia-1",
            "friction-1",
            "pattern-1",
        ]
        assert all(r.content == "" for r in store.snapshot())

    def test_seed_blank_schema_with_seed(self):
        store = BoardStore.hydrate(SYNTHESIS, {"push": ["Checkout keeps failing"]})
        assert len(store) == 1


class TestAddBlock:
    """Test add_block."""

    def test_scenario_a_add_to_empty_category(self, recorder):
        """Add into segments leaves problem untouched and grows the snapshot."""
        store = BoardStore.hydrate(
            DECONSTRUCT, {"problem": ["Slow checkout"], "segments": []}, on_change=recorder
        )
        before = store.blocks("problem")

        block, created = store.add_block("segments")

        assert created is True
        assert len(store.blocks("segments")) == 1
        assert store.blocks("problem") == before
        assert len(recorder.last) == 2
        assert block.text == ""
        assert block.category == "segments"

    def test_inserted_at_head(self, board):
        block, _ = board.add_block("problem")
        assert ids(board, "problem") == [block.id, "problem-0", "problem-1"]

    def test_fresh_ids(self, board):
        first, _ = board.add_block("problem")
        second, _ = board.add_block("problem")
        assert first.id != second.id

    def test_colliding_id_factory_regenerated(self):
        """A factory that repeats itself still yields unique ids."""
        store = BoardStore(DECONSTRUCT, id_factory=lambda category: "same")
        first, _ = store.add_block("problem")
        second, _ = store.add_block("problem")
        assert first.id == "same"
        assert second.id != "same"

    def test_unknown_category_raises(self, board, recorder):
        with pytest.raises(UnknownCategoryError):
            board.add_block("competitors")
        assert len(recorder.calls) == 1

    def test_full_category_returns_existing(self, board, recorder):
        """Single-card rule: adding to a full JTBD returns the existing card."""
        block, created = board.add_block("job-to-be-done")

        assert created is False
        assert block.id == "job-to-be-done-0"
        assert len(board.blocks("job-to-be-done")) == 1
        assert len(recorder.calls) == 1

    def test_notifies_once(self, board, recorder):
        board.add_block("segments")
        assert len(recorder.calls) == 2


class TestEditBlock:
    """Test edit_block."""

    def test_replaces_text_in_place(self, board, recorder):
        assert board.edit_block("problem-1", "Hidden fees: surprise at checkout") is True

        assert ids(board, "problem") == ["problem-0", "problem-1"]
        assert board.get("problem-1").text == "Hidden fees: surprise at checkout"
        assert recorder.last[1].title == "Hidden fees"

    def test_unknown_id_is_noop(self, board, recorder):
        before = board.lists()
        assert board.edit_block("nope", "text") is False
        assert board.lists() == before
        assert len(recorder.calls) == 1

    def test_same_text_is_noop(self, board, recorder):
        assert board.edit_block("problem-1", "Hidden fees") is False
        assert len(recorder.calls) == 1


class TestRemoveBlock:
    """Test remove_block."""

    def test_removes_from_owning_category(self, board):
        assert board.remove_block("problem-0") is True
        assert ids(board, "problem") == ["problem-1"]
        assert "problem-0" not in board

    def test_scenario_e_unknown_id(self, board, recorder):
        """Removing a nonexistent id leaves the board unchanged and raises nothing."""
        before = board.lists()
        assert board.remove_block("nonexistent") is False
        assert board.lists() == before
        assert len(recorder.calls) == 1


class TestReorder:
    """Test reorder_within_category."""

    def test_scenario_b_swap(self, board):
        board.reorder_within_category("problem", 0, 1)
        assert ids(board, "problem") == ["problem-1", "problem-0"]

    def test_membership_preserved(self):
        store = BoardStore.hydrate(DECONSTRUCT, {"problem": ["a", "b", "c", "d"]})
        store.reorder_within_category("problem", 3, 0)
        assert [b.text for b in store.blocks("problem")] == ["d", "a", "b", "c"]
        assert set(ids(store, "problem")) == {"problem-0", "problem-1", "problem-2", "problem-3"}

    def test_to_index_clamped(self):
        store = BoardStore.hydrate(DECONSTRUCT, {"problem": ["a", "b", "c"]})
        assert store.reorder_within_category("problem", 0, 99) is True
        assert [b.text for b in store.blocks("problem")] == ["b", "c", "a"]

    @pytest.mark.parametrize("from_index", [-1, 2, 50])
    def test_from_index_out_of_range_is_noop(self, board, recorder, from_index):
        assert board.reorder_within_category("problem", from_index, 0) is False
        assert len(recorder.calls) == 1

    def test_same_index_is_noop(self, board, recorder):
        assert board.reorder_within_category("problem", 1, 1) is False
        assert len(recorder.calls) == 1

    def test_unknown_category_is_noop(self, board):
        assert board.reorder_within_category("competitors", 0, 1) is False


class TestMoveAcrossCategory:
    """Test move_across_category."""

    def test_scenario_c_move_to_head(self, board):
        assert board.move_across_category("problem-0", "problem", "segments", 0) is True

        assert "problem-0" not in ids(board, "problem")
        moved = board.blocks("segments")[0]
        assert moved.id == "problem-0"
        assert moved.category == "segments"

    def test_other_blocks_untouched(self, board):
        before = {b.id: b for blocks in board.lists().values() for b in blocks}
        board.move_across_category("problem-0", "problem", "segments", 1)
        after = {b.id: b for blocks in board.lists().values() for b in blocks}

        for block_id, block in before.items():
            if block_id != "problem-0":
                assert after[block_id] == block

    def test_index_clamped_to_end(self, board):
        board.move_across_category("problem-0", "problem", "segments", 99)
        assert ids(board, "segments") == ["segments-0", "problem-0"]

    def test_negative_index_clamped_to_head(self, board):
        board.move_across_category("problem-0", "problem", "segments", -5)
        assert ids(board, "segments") == ["problem-0", "segments-0"]

    def test_single_notification_with_consistent_snapshot(self, board, recorder):
        """The one snapshot emitted holds the block exactly once."""
        board.move_across_category("problem-0", "problem", "alternatives", 0)

        assert len(recorder.calls) == 2
        hits = [r for r in recorder.last if r.id == "problem-0"]
        assert len(hits) == 1
        assert hits[0].category == "alternatives"

    def test_block_not_in_source_is_noop(self, board, recorder):
        before = board.lists()
        assert board.move_across_category("segments-0", "problem", "alternatives", 0) is False
        assert board.lists() == before
        assert len(recorder.calls) == 1

    def test_same_category_is_noop(self, board):
        assert board.move_across_category("problem-0", "problem", "problem", 1) is False

    def test_unknown_category_is_noop(self, board):
        assert board.move_across_category("problem-0", "problem", "competitors", 0) is False
        assert "problem-0" in ids(board, "problem")

    def test_full_target_rejected(self, board):
        assert board.move_across_category("problem-0", "problem", "job-to-be-done", 0) is False
        assert ids(board, "job-to-be-done") == ["job-to-be-done-0"]
        assert "problem-0" in ids(board, "problem")


class TestProperties:
    """Invariants under arbitrary operation sequences."""

    def test_random_operations_keep_invariants(self, sample_seed):
        rng = random.Random(7)
        store = BoardStore.hydrate(DECONSTRUCT, sample_seed)
        keys = DECONSTRUCT.keys()

        for _ in range(500):
            all_ids = [b.id for blocks in store.lists().values() for b in blocks]
            op = rng.choice(["add", "edit", "remove", "reorder", "move"])
            if op == "add":
                store.add_block(rng.choice(keys))
            elif op == "edit" and all_ids:
                store.edit_block(rng.choice(all_ids), f"text {rng.random()}")
            elif op == "remove" and all_ids and rng.random() < 0.3:
                store.remove_block(rng.choice(all_ids))
            elif op == "reorder":
                key = rng.choice(keys)
                store.reorder_within_category(key, rng.randint(-1, 6), rng.randint(-1, 6))
            elif op == "move" and all_ids:
                block_id = rng.choice(all_ids)
                store.move_across_category(
                    block_id, store.category_of(block_id), rng.choice(keys), rng.randint(-2, 8)
                )
            assert_invariants(store)
            assert len(store.blocks("job-to-be-done")) <= 1

    def test_snapshot_is_a_value(self, board, recorder):
        """Earlier snapshots are not affected by later mutations."""
        first = recorder.last
        board.edit_block("problem-0", "Changed")
        assert first[0].content == "Slow checkout: carts abandoned at payment"

    def test_blocks_returns_copy(self, board):
        board.blocks("problem").append(Block(id="x", category="problem"))
        assert "x" not in board

    def test_set_listener_replaces(self, board, recorder):
        calls = []
        board.set_listener(calls.append)
        board.add_block("segments")
        assert len(calls) == 1
        assert len(recorder.calls) == 1
