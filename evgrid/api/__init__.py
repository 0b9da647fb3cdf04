"""HTTP routers for telemetry ingest, status, analytics and health."""
