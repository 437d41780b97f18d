"""Firestore repository implementation."""

from papertrade.repositories.firestore.remote_store import FirestoreRemoteStore, translate_errors

__all__ = [
    "FirestoreRemoteStore",
    "translate_errors",
]
