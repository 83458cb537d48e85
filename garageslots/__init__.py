"""
garageslots - appointment slot and employee availability engine for a garage CRM.
"""

__version__ = "0.1.0"
