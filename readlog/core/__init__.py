"""
Core utilities shared by the engine, the database layer and the CLI:
exceptions, logging, paths, the clock and date helpers.
"""
