"""Domain services behind the RPC procedures."""
