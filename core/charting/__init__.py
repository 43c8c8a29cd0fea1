"""Chart rendering helpers.

Charts are drawn client-side by Chart.js. This package converts ChartSeries
values into Chart.js payloads and defines the sink interface used by the
report dashboard.
"""
