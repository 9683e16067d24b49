"""Core: domain models, configuration and transfer orchestration.

Nothing in here prints to the terminal; the CLI owns user-facing output.
"""
