"""Sync — reconcile the RBIs on disk with the RBIs that should exist.

This package provides:
- Reconciler: the pure diff producing a categorized Plan
- Executor: applies a Plan (removals first, then generation)
- Verify reporter: renders a Plan without touching the filesystem
- Session: wires scanner, builder and reconciler together for one run
"""
