"""
Test suite for domlens.

Unit tests per component plus end-to-end parser tests.
"""
