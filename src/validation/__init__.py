"""Record validation layer.

This module adapts JSON Schema validation to the pipeline: per-configuration
keyword registries and path-keyed error reports.
"""
