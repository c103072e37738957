"""
Telemetry ingestion and usage aggregation.
"""
