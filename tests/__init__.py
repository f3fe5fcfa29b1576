"""
Test package marker.

Keeps `tests` a regular package so pytest imports this checkout's
`tests.fixtures` modules rather than a same-named namespace elsewhere.
"""
