"""
relife-advisor - building renovation decision support.

Matches a user's building to a reference archetype, applies the user's
modifications to its simulation payload, and ranks renovation scenarios
with TOPSIS.
"""

__version__ = "0.1.0"
