"""
Test suite for the Knowledge Graph Engine.

Covers the graph store, entity resolution, path finding,
file formats, configuration and the CLI.
"""
