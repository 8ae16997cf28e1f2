"""HTTP interface: routers, identity and error handling."""
