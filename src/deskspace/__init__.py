"""deskspace — save a named set of applications and relaunch them later.

A workspace is an ordered list of launch specifications (label, command,
arguments). Workspaces are persisted as versioned JSON files and restored
by spawning each application in order.
"""

__version__ = "0.1.0"
