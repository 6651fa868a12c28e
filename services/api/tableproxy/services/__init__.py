"""Business logic services.

Services contain all business logic and are called by routes.
Settings are passed in explicitly rather than read from globals.
"""
