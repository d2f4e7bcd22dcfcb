"""Build pass: project discovery, entry map construction and orchestration."""
