"""
Package marker for the Cleo content API.
It groups the HTTP layer (`cleo.api`) and shared helpers (`cleo.common`) under one import path.
Most functionality lives in the sibling packages; this file intentionally stays lightweight.
"""
