"""Processing services: normalization, batch processing, aggregation, output."""
