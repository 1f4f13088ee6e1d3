"""
Version 1 of the API.

Mounted under ``/api`` by the application factory so that resource
paths read ``/api/posts``, ``/api/users`` and so on.
"""
