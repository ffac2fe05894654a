"""
Policies package.

Public API:
    Policy: Named list of rule IDs with resolved content
    PolicyIndex: Policies loaded from disk plus the synthesized 'all' policy
"""

from .index import PolicyIndex
from .models import ALL_POLICY, Policy, create_all_policy

__all__ = [
    'Policy',
    'PolicyIndex',
    'ALL_POLICY',
    'create_all_policy',
]
