"""
v1 endpoint modules, one router per resource.
"""
