"""Outbound collaborators: transactional email and image storage.

Callers treat both as fire-and-forget: failures are logged and reported as a
falsy result, never raised into the request that triggered them.
"""
