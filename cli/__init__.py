"""Command-line client for the plant telemetry monitor."""
