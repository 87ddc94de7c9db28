"""Binary ZIP container reading.

This package locates ZIP metadata, resolves member payloads,
and decompresses them without a general archive library.
"""
