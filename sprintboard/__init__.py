"""
Sprint Dashboard - Backend Application

This package contains the backend logic for the sprint dashboard.
It includes API endpoints, the GitHub client and the services that page
through GitHub and assemble backlog and sprint views.
"""

__version__ = "0.1.0"
