"""Infrastructure layer.

Configuration, database access, logging and the generation provider client.
"""
