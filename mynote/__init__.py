"""
MyNote.

- backend/: REST API, access-control policy, persistence, configuration
"""
