"""
Boundary layer: relational persistence and the vector store adapter.
"""
