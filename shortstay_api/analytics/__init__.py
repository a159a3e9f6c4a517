"""
Host reputation analytics.

Computes hostScore / avgRating from visible recommendations and persists
them onto the host's user record.
"""

from shortstay_api.analytics.host_stats import HostStats, compute_host_stats, recompute_host_stats

__all__ = ["HostStats", "compute_host_stats", "recompute_host_stats"]
