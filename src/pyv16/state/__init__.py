"""State layer.

Owns the only mutable objects in the library: the current beacon batch
and the map viewport. Everything else reads from them.
"""
