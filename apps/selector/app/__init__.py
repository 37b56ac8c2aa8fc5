"""HTTP front end for per-trip flight selectors."""
