"""
FastAPI Backend API

This package contains the REST API endpoints for the sprint dashboard.
"""
