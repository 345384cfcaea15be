"""Account-level helpers.

This package resolves the reporting window of an exercise, lists the accounts
published by a company and extracts their values for one exercise.
"""
