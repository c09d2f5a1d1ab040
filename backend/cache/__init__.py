"""On-disk caches for chart images and filled reports."""
