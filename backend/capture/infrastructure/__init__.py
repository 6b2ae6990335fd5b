"""Infrastructure Layer — concrete entry store and logging setup.

Invariants:
    - Infrastructure implements core protocols; core never imports from here
    - All driver exceptions are mapped to core error types before leaving this layer
"""
