"""Adapters around the merge engine: document translation and catalog storage."""
