"""
Navae driver assistant: live hazard detection overlay with spoken alerts.
"""

__version__ = "0.1.0"
