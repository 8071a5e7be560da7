"""
Repository layer: SQLAlchemy data access for the fee engine.
"""
