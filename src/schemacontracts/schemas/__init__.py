"""
Schema modules for contract compilation reports.

This package hosts lightweight dataclasses that define the row layout of
tables emitted by the extractor and the compiler.
"""

__all__ = [
    "contract_rows",
]
