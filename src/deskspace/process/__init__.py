"""OS process enumeration, launching and termination."""
