"""I/O helpers: Parquet schemas and output path conventions."""
