"""Period aggregation and KPI derivation.

- periods.py: calendar windows (week/month/quarter/year), range checks, month keys
- rules.py: quotation / sales-order inclusion rules
- aggregator.py: grouped counts, values and conversion rates; totals; rankings
- targets.py: monthly target progress
- dashboard.py: headline KPI cards
"""
