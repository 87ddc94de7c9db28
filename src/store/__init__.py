"""Dataset output layer.

This module serializes parsed datasets for downstream converters.
It writes JSON payloads and single-table delimited exports.
"""
