"""models — domain records for integrations and analysis results."""
