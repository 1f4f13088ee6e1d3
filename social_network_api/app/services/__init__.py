"""
Service layer.

Each service receives its dependencies (the ``Database`` and, for
posts, the image storage) explicitly and encapsulates the business
rules of one domain so that API handlers stay thin.
"""
