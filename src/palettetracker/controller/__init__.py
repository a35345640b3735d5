"""
The CONTROLLER layer turns user input into model operations and owns the
objects of a running session.
"""
