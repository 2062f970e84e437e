"""HTTP front end for Eleven."""
