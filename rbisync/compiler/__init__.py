"""Compiler — the boundary to whatever produces RBI content for a gem.

The engine only relies on the four outcomes of ``ArtifactCompiler.compile``;
``ManifestCompiler`` is the concrete implementation backed by a YAML manifest.
"""
