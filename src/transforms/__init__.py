"""Record transforms.

This module holds the path-addressed projection, sanitization, merge,
and validation-hardening transforms applied by the pipeline.
"""
