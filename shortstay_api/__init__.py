"""
ShortStay API: REST backend for a short-stay rental marketplace.

Users authenticate with Firebase, publish listings and rental requests, and
recommend hosts. Host reputation (hostScore / avgRating) is recomputed from
recommendations on every recommendation write.
"""

__version__ = "0.1.0"
