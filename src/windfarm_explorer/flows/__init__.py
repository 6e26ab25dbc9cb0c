"""
Prefect flows for the exploration pipeline.

Flows:
- explore: fetch one OBIS dataset, unnest its MeasurementOrFact rows,
  filter spatially, and build aggregation / taxonomy tables

Usage (local):
    python -m windfarm_explorer.flows.explore <dataset-id>

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m windfarm_explorer.flows.explore <dataset-id>
"""
