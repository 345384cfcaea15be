"""Sector peer resolution and peer-group averaging.

The sector-membership file lists peers by display name; these are matched
against the companies present in the store before their accounts are
averaged.
"""
