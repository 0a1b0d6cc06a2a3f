"""Tests for searchcomponents utility modules.

Covers the logger factory and the conversion of canonical documents into
Haystack and LangChain documents.
"""
