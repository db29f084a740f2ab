"""HTTP collaborators — the request the mux reads and the writer it fills."""
