"""Derived read-only views over an ``EntityStore``.

Every function recomputes from the store on each call; nothing here holds
state of its own. Results are plain lists, so callers get a stable copy
they can keep after the store changes.
"""

from __future__ import annotations

from .models import Document, FilterType
from .store import EntityStore


def all_documents(store: EntityStore) -> list[Document]:
    """All documents in insertion order."""
    return list(store.all())


def dirty_documents(store: EntityStore) -> list[Document]:
    """Documents whose local copy diverges from the authority."""
    return [doc for doc in store.all() if doc.is_dirty]


def clean_documents(store: EntityStore) -> list[Document]:
    """Documents that match the last acknowledged authoritative copy."""
    return [doc for doc in store.all() if not doc.is_dirty]


def filtered_documents(
    store: EntityStore, filter_type: FilterType
) -> list[Document]:
    """Apply *filter_type* to the store.

    ``NONE`` returns every document, ``ONLY_DIRTY`` and ``ONLY_CLEAN``
    return the matching partition.
    """
    match filter_type:
        case FilterType.ONLY_DIRTY:
            return dirty_documents(store)
        case FilterType.ONLY_CLEAN:
            return clean_documents(store)
        case _:
            return all_documents(store)


def document_counts(
    store: EntityStore, filter_type: FilterType = FilterType.NONE
) -> dict[str, int]:
    """Counts of the all, dirty, clean and filtered views."""
    dirty = len(dirty_documents(store))
    total = len(store)
    return {
        "all": total,
        "dirty": dirty,
        "clean": total - dirty,
        "filtered": len(filtered_documents(store, filter_type)),
    }
