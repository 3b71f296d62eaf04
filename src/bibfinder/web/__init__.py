"""HTTP interface for bibfinder."""
