"""
labels_backend.domain — Canonical data models, enumerations and errors.

This package defines the source-of-truth types shared across every layer of
the labels backend. Nothing in here should import from other labels_backend
sub-packages except ``labels_backend.core``.
"""
