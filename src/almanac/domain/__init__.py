"""Domain layer: intervals, tables, parser and resolver.

This layer depends only on stdlib.
It must never import from services, commands, output, or config.
"""
