"""
Events service: event planning, invitations and scheduling-conflict checks.
"""
