"""Adapters: filesystem and HTTP I/O.

- `condor_creds`: reads tokens from `_CONDOR_CREDS`.
- `director`: asks the Pelican director where a namespace is served.
- `transfer`: moves object bytes to/from an origin.
"""
