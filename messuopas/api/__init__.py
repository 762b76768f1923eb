"""JSON HTTP surface for Messuopas."""
