"""
Workshop KPIs — Multi-location Sales & Operations Dashboard

Analytics backend that turns per-location performance rows (target vs.
actual vs. % achievement per named parameter) into categorised,
counted, dashboard-ready views.

To connect a front end:
    Keep the selected location in the UI and call
    dashboard.query_view(location_index, selector) whenever it changes.
    The result holds metric frames per category and rollup counts.

To feed data from a store or upload:
    Pass the fetched records to loaders.build_location_index(); it maps
    upload headers to the canonical row schema and groups by location.

To retune categories:
    Edit config.CATEGORY_KEYWORDS. Matching is case-insensitive substring.
"""
