"""Transit archive ingestion.

This package loads archive bytes from local or remote sources and
turns them into typed datasets of the six feed tables.
"""
