"""
Low-level building blocks for changelog-digest: git log parsing, date
handling, prompt building and model reply parsing.
"""
