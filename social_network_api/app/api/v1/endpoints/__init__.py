"""
Endpoint subpackage for API v1.

Each module in this package defines an APIRouter for one resource
(auth, users, posts, feed, explore, search).  The routers are
aggregated in ``router.py`` at the package level.
"""
