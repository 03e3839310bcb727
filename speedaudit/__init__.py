"""
SpeedAudit: mobile performance audits for a site's high-value pages.
"""

__version__ = "0.1.0"
