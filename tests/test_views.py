"""Tests for the derived document views."""

from __future__ import annotations

import pytest

from offline_docs.documents import views
from offline_docs.documents.models import FilterType
from offline_docs.documents.store import EntityStore


@pytest.fixture
def mixed_store(make_doc) -> EntityStore:
    """Store with ids a..e where b and d are dirty."""
    store = EntityStore()
    for doc_id in "abcde":
        store.add_document(make_doc(id=doc_id))
    store.edit_document("b", {"title": "edited"})
    store.edit_document("d", {"title": "edited"})
    return store


def _ids(docs) -> list[str]:
    return [d.id for d in docs]


def test_all_documents_in_insertion_order(mixed_store):
    assert _ids(views.all_documents(mixed_store)) == list("abcde")


def test_dirty_documents_preserve_relative_order(mixed_store):
    assert _ids(views.dirty_documents(mixed_store)) == ["b", "d"]


def test_clean_documents_are_complement(mixed_store):
    assert _ids(views.clean_documents(mixed_store)) == ["a", "c", "e"]


@pytest.mark.parametrize(
    "filter_type, expected",
    [
        (FilterType.NONE, list("abcde")),
        (FilterType.ONLY_DIRTY, ["b", "d"]),
        (FilterType.ONLY_CLEAN, ["a", "c", "e"]),
    ],
)
def test_filtered_documents(mixed_store, filter_type, expected):
    assert _ids(views.filtered_documents(mixed_store, filter_type)) == expected


def test_dirty_and_clean_partition_all(mixed_store):
    dirty = views.filtered_documents(mixed_store, FilterType.ONLY_DIRTY)
    clean = views.filtered_documents(mixed_store, FilterType.ONLY_CLEAN)

    assert sorted(_ids(dirty) + _ids(clean)) == sorted(
        _ids(views.all_documents(mixed_store))
    )
    assert not set(_ids(dirty)) & set(_ids(clean))


def test_views_recompute_after_mutation(mixed_store):
    assert len(views.dirty_documents(mixed_store)) == 2

    mixed_store.mark_clean(["b"])
    mixed_store.edit_document("e", {"content": "x"})

    assert _ids(views.dirty_documents(mixed_store)) == ["d", "e"]


def test_document_counts(mixed_store):
    assert views.document_counts(mixed_store, FilterType.ONLY_DIRTY) == {
        "all": 5,
        "dirty": 2,
        "clean": 3,
        "filtered": 2,
    }


def test_views_on_empty_store():
    store = EntityStore()
    assert views.all_documents(store) == []
    assert views.dirty_documents(store) == []
    assert views.document_counts(store)["filtered"] == 0
