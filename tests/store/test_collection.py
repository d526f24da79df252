"""Tests for delta folding and the in-memory collection."""

import pytest

from surgery_agenda.store import StoreSnapshot, SurgeryCollection, SurgeryDeleted, SurgeryInserted, SurgeryUpdated, fold_delta


def test_insert_appends(make_surgery):
    result = fold_delta((make_surgery("a"),), SurgeryInserted(surgery=make_surgery("b")))
    assert [s.id for s in result] == ["a", "b"]


def test_insert_of_known_id_replaces(make_surgery):
    """Redelivered inserts must not duplicate a surgery."""
    original = make_surgery("a", patient_name="Old")
    result = fold_delta((original,), SurgeryInserted(surgery=make_surgery("a", patient_name="New")))
    assert [s.patient_name for s in result] == ["New"]


def test_update_replaces_in_place(make_surgery):
    surgeries = (make_surgery("a"), make_surgery("b"), make_surgery("c"))
    result = fold_delta(surgeries, SurgeryUpdated(surgery=make_surgery("b", notes="changed")))
    assert [s.id for s in result] == ["a", "b", "c"]
    assert result[1].notes == "changed"


def test_update_of_unknown_id_appends(make_surgery):
    result = fold_delta((), SurgeryUpdated(surgery=make_surgery("x")))
    assert [s.id for s in result] == ["x"]


def test_delete(make_surgery):
    surgeries = (make_surgery("a"), make_surgery("b"))
    assert [s.id for s in fold_delta(surgeries, SurgeryDeleted(surgery_id="a"))] == ["b"]
    assert fold_delta(surgeries, SurgeryDeleted(surgery_id="missing")) == surgeries


def test_unknown_delta_rejected():
    with pytest.raises(TypeError):
        fold_delta((), "not a delta")


def test_folding_sequence_matches_final_state(make_surgery):
    deltas = [
        SurgeryInserted(surgery=make_surgery("a")),
        SurgeryInserted(surgery=make_surgery("b")),
        SurgeryUpdated(surgery=make_surgery("a", status="Completed")),
        SurgeryDeleted(surgery_id="b"),
        SurgeryInserted(surgery=make_surgery("c")),
    ]
    state: tuple = ()
    for delta in deltas:
        state = fold_delta(state, delta)
    assert [(s.id, s.status.value) for s in state] == [("a", "Completed"), ("c", "Scheduled")]


class TestSurgeryCollection:
    def test_replace_all(self, make_surgery, doctors, hospitals, insurance_plans):
        snapshot = StoreSnapshot(
            surgeries=(make_surgery("a"),),
            doctors=tuple(doctors),
            hospitals=tuple(hospitals),
            insurance_plans=tuple(insurance_plans),
        )
        collection = SurgeryCollection(snapshot)

        assert len(collection) == 1
        assert collection.doctor("d2").name == "Bruno Lima"
        assert collection.hospital("h2").name == "Clínica Norte"
        assert collection.insurance_plan("p9") is None

    def test_apply_and_acknowledge(self, make_surgery):
        collection = SurgeryCollection()
        collection.apply(SurgeryInserted(surgery=make_surgery("a")))
        collection.acknowledge(make_surgery("a", notes="local"))
        collection.acknowledge(make_surgery("b"))

        assert [s.id for s in collection.surgeries] == ["a", "b"]
        assert collection.get("a").notes == "local"
        assert collection.get("zzz") is None

    def test_replace_catalog_keeps_unspecified_parts(self, doctors, hospitals):
        collection = SurgeryCollection(StoreSnapshot(doctors=tuple(doctors), hospitals=tuple(hospitals)))
        collection.replace_catalog(hospitals=[])

        assert collection.hospitals == ()
        assert len(collection.doctors) == 3
