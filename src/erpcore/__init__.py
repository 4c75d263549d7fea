"""ERP aggregate reconciliation engine."""
