"""Application services on top of the journal store."""
