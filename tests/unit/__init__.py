"""Unit tests for individual components in isolation.

Coverage:
    - config: Settings defaults and validation
    - compression/: Tool probing, strategies, execution, selection, engine

External tools are replaced by a fake command runner that writes
candidate files of chosen sizes. Leverages pytest-check for multiple
assertions per test.
"""
