"""
HTTP layer of the fee engine.
"""
