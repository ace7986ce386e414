"""
Orpheus CLI - database bootstrap, seeding and admin helpers.
"""
