"""
Domain objects for vendorbranch.
"""

from .operation import ImportState, ImportResult, ImportSummary, ImportRecord

__all__ = [
    'ImportState',
    'ImportResult',
    'ImportSummary',
    'ImportRecord',
]
