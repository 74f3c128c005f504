"""
qmatrix Dashboard API.

Launch with: qmatrix serve
Or programmatically: from qmatrix.dashboard import launch; launch()
"""

from qmatrix.dashboard.server import create_app, launch

__all__ = ["create_app", "launch"]
