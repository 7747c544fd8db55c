"""MongoDB JSON-command completion pipeline."""
