"""Service layer: scrape queue."""
