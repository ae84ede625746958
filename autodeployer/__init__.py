"""
AutoDeployer
Runs a script or installs/repairs/uninstalls a package on many computers at once
"""

__version__ = "1.0.0"
