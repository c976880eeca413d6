"""HTTP routers for the pname service."""
