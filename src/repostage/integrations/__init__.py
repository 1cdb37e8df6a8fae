"""
repostage.integrations - Host Build Integration
=================================================

Sources of the project graph the orchestrator walks.

Components:
    - build_graph: loads a YAML build manifest into linked Project models
"""

from repostage.integrations.build_graph import BuildGraph, build_graph, load_build_manifest

__all__ = [
    "BuildGraph",
    "build_graph",
    "load_build_manifest",
]
