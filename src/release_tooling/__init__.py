"""Release tooling: changeset summaries and upstream version sync."""
