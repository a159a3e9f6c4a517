"""
API server package: HTTP/REST interface.

Exposes listings, rental requests, host profiles and recommendations.
Handles bearer authentication and delegates to the database and analytics
layers for data.
"""
