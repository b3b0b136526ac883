"""
offsetup: declarative environment setup for a project.

Reads an offsetup.yml manifest, resolves it against the host platform
and runs the platform's install steps.
"""

__version__ = "0.1.0"
