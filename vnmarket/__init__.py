"""Local cache of Vietnamese market reference data (stocks, indices, funds)."""
