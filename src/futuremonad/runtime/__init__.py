"""Runtime - the environment-supplied future and its bridges."""
