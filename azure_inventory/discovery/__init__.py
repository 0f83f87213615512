"""Azure resource discovery: REST access, typed records, filtering and joining."""
