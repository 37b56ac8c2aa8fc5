"""Record store service: trips, flights and tickets over sqlite."""
