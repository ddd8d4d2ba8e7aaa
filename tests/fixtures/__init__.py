"""
Funnel.vc Test Fixtures Package
Reusable factories for test data.
"""

from .factories import *
