"""SQL completion pipeline: scanner, context resolver, generators and provider."""
