"""Record pipeline orchestration.

This module runs the fixed transform steps over one record in either
direct or deferred execution mode.
"""
