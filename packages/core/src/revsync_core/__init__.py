"""Comment reconciliation engine and platform gateways."""
