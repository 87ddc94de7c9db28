"""Delimited table parsing.

This package turns decoded member text into rows and sparse
typed records for the six transit feed tables.
"""
