"""
Integration tests for lucenesearch.

These tests run queries end to end: clause compilation, parsing,
execution against an in-memory index and model loading.
"""
