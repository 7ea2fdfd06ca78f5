"""
Use cases, organized by domain:
- invitations/: invitation lifecycle and gate admission
- access/: access log and manual entries
- memberships/: tenant directory and member administration
"""
