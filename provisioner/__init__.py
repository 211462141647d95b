"""
Repository & Board Provisioning - Backend Application

This package contains the REST facade that provisions Git repositories
(Azure DevOps, GitHub) and Scrum boards (Jira) by proxying to the
upstream SaaS APIs.
"""

__version__ = "0.1.0"
